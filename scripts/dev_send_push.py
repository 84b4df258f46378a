# Send a signed GitHub 'push' delivery to localhost:8787
import hashlib
import hmac
import json
import os
import sys

import httpx

repository = sys.argv[1] if len(sys.argv) > 1 else "octocat/hello-world"
ref = sys.argv[2] if len(sys.argv) > 2 else "refs/heads/main"
body = {"ref": ref, "after": "abcdef1234567890", "repository": {"full_name": repository}}
b = json.dumps(body, separators=(",", ":"), sort_keys=True).encode("utf-8")
secret = os.getenv("NEXTVERSION_WEBHOOK_SECRET", "change-me")
mac = hmac.new(secret.encode("utf-8"), b, hashlib.sha256).hexdigest()

headers = {
    "X-Hub-Signature-256": f"sha256={mac}",
    "X-GitHub-Event": "push",
    "Content-Type": "application/json",
}
url = "http://127.0.0.1:8787/hooks/github"

print("POST", url, "headers:", headers)
r = httpx.post(url, headers=headers, content=b, timeout=30)
print(r.status_code, r.text)
