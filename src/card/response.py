import io
import traceback

import azure.functions as func
from PIL import Image


FILENAME = "result.png"


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def content_disposition(download: bool) -> str:
    disposition = "attachment" if download else "inline"
    return f'{disposition}; filename="{FILENAME}"'


def png_response(png: bytes, download: bool) -> func.HttpResponse:
    return func.HttpResponse(
        body=png,
        status_code=200,
        mimetype="image/png",
        headers={
            "Content-Type": "image/png",
            "Cache-Control": "no-store",
            "Content-Disposition": content_disposition(download),
        },
    )


def error_response(exc: BaseException) -> func.HttpResponse:
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return func.HttpResponse(
        body=f"Failed to generate image.\n\n{detail}",
        status_code=500,
        mimetype="text/plain",
        charset="utf-8",
    )
