from __future__ import annotations

import io
import logging
from datetime import datetime

from flask import Flask, request, send_file

from ..common.datetime_utils import first_day_of_month, parse_iso_date
from ..common.web import admin_required, error_response, fail
from ..container import Container
from ..core.exceptions import DomainError

_logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/export", endpoint="admin_export")
    @admin_required
    def export():
        # Default range: first day of the current month through today.
        today = datetime.now(container.tz).date()
        try:
            start = parse_iso_date(request.args["start"]) if request.args.get("start") else first_day_of_month(today)
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else today
        except ValueError:
            return fail("Datas inválidas", 400)

        try:
            artifact = container.report_service().export(start=start, end=end)
        except DomainError as e:
            return error_response(e)
        except Exception:
            _logger.exception("Export failed for %s..%s", start, end)
            return fail("Erro ao gerar relatório.", 500)

        return send_file(
            io.BytesIO(artifact.content),
            mimetype=artifact.mimetype,
            as_attachment=True,
            download_name=artifact.filename,
        )
