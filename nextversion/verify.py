import hashlib
import hmac


def _cteq(a: str, b: str) -> bool:
    return hmac.compare_digest(a, b)


def verify_github(secret: str, header_value: str, body: bytes) -> tuple[bool, str]:
    # GitHub: X-Hub-Signature-256: 'sha256=<hex>'
    if not header_value:
        return False, "missing_header"
    if not header_value.startswith("sha256="):
        return False, "unsupported_algorithm"
    provided = header_value.split("=", 1)[1].strip()
    mac = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return (_cteq(mac, provided), "ok" if _cteq(mac, provided) else "mismatch")
