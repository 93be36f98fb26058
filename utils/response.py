from flask import g, has_request_context, jsonify


def json_response(message="success", data=None, code=200):
    body = {"code": code, "message": message, "data": data}
    # 便于宿主系统按 request_id 对照日志
    if has_request_context() and getattr(g, "request_id", None):
        body["request_id"] = g.request_id
    resp = jsonify(body)
    resp.status_code = code
    return resp
