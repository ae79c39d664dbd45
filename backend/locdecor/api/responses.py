"""
Respostas de download
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

from urllib.parse import quote

from fastapi import Response

PDF = "application/pdf"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV = "text/csv; charset=utf-8"


def attachment(content: bytes | str, file_name: str, media_type: str) -> Response:
    """Resposta com Content-Disposition de anexo (nome em UTF-8)."""
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_name)}"},
    )
