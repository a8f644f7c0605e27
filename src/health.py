from keydrop import __version__
from keydrop.logger import log


def lambda_handler(event, context):
    http = (event or {}).get("requestContext", {}).get("http", {})
    path = http.get("path") or (event or {}).get("rawPath") or "/healthz"
    log("health.check", path=path, method=http.get("method", "GET"))

    if path.rstrip("/").endswith("/version"):
        body = '{"version":"%s"}' % __version__
    else:
        body = '{"status":"ok"}'

    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": body,
    }
