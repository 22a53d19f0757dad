import json
import logging

from django.apps import apps
from django.http import HttpResponse, HttpResponseBadRequest, HttpResponseForbidden
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .dispatcher import build_dispatcher

logger = logging.getLogger(__name__)

SECRET_HEADER = 'X-Telegram-Bot-Api-Secret-Token'


@csrf_exempt
@require_POST
def telegram_webhook(request):
    """
    Receives one Telegram update. Once the body parses, the answer is always
    200 so Telegram does not redeliver the update, whatever happened inside.
    """
    config = apps.get_app_config('bot').bot_config

    if config.webhook_secret:
        provided = request.headers.get(SECRET_HEADER, '')
        if not constant_time_compare(provided, config.webhook_secret):
            logger.warning("Rejected webhook call with a missing or wrong secret token")
            return HttpResponseForbidden("Forbidden")

    try:
        update = json.loads(request.body)
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning(f"Rejected webhook call with an unparsable body: {str(e)}")
        return HttpResponseBadRequest("Invalid Request Body")

    try:
        dispatcher = build_dispatcher(config)
        dispatcher.dispatch(update)
    except Exception as e:
        logger.exception(f"Unhandled error while processing update: {e}")

    return HttpResponse("OK")
