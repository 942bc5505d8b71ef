from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse, Response


router = APIRouter(tags=["site"])

INFO_PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Know2Close chat</title>
</head>
<body>
  <h1>Know2Close chat</h1>
  <p>This endpoint relays chat messages to the Know2Close assistant.</p>
  <p>Send <code>POST /api/know2close</code> with a JSON body:</p>
  <pre>{"message": "Hello", "thread_id": "optional thread id from a previous reply"}</pre>
  <p>The reply is <code>{"thread_id": "...", "reply": "..."}</code>.
     Pass the returned <code>thread_id</code> back to continue the conversation.</p>
</body>
</html>
"""


@router.options("/{path:path}", include_in_schema=False)
async def preflight(path: str):
    return Response(status_code=204)


@router.get("/{path:path}", response_class=HTMLResponse, include_in_schema=False)
async def info_page(path: str):
    return HTMLResponse(INFO_PAGE)


@router.api_route(
    "/{path:path}",
    methods=["POST", "PUT", "PATCH", "DELETE", "HEAD"],
    include_in_schema=False,
)
async def method_not_allowed(path: str):
    return PlainTextResponse("Method Not Allowed", status_code=405)
