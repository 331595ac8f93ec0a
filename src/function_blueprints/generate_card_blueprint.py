import uuid

import azure.functions as func

from src.card.renderer import render_card
from src.card.response import error_response, png_response
from src.shared.logging_utils import info as log_info, error as log_error
from src.specs.common.errors import StatCardError


bp = func.Blueprint()


def handle_generate(req: func.HttpRequest) -> func.HttpResponse:
    request_id = uuid.uuid4().hex
    query = dict(req.params)
    log_info(request_id, "generate:request", params=sorted(query))
    try:
        card = render_card(query, request_id=request_id)
    except Exception as exc:
        err = exc.to_dict() if isinstance(exc, StatCardError) else {"code": "UNHANDLED", "message": str(exc)}
        log_error(request_id, "generate:failed", exc_info=True, errorType=type(exc).__name__, error=err)
        return error_response(exc)
    return png_response(card.png, card.config.download)


@bp.function_name(name="generate")
@bp.route(route="generate", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def generate(req: func.HttpRequest) -> func.HttpResponse:
    return handle_generate(req)
