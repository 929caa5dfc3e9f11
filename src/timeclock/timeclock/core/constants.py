"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_GEO_TIMEOUT_SECONDS = 10.0
DEFAULT_JPEG_QUALITY = 85
DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_DATE_FORMAT = "%d/%m/%Y"
DEFAULT_TIME_FORMAT = "%H:%M:%S"

MAP_LINK_TEMPLATE = "https://www.google.com/maps?q={latitude},{longitude}"

UNKNOWN_EMPLOYEE_NAME = "Desconhecido"
UNKNOWN_EMPLOYEE_HANDLE = "N/A"

EXPORT_SHEET_NAME = "Relatório Ponto"
EXPORT_FILENAME_TEMPLATE = "Relatorio_{start}_a_{end}.xlsx"
EXPORT_COLUMNS = (
    ("Nome do Funcionário", 30),
    ("CPF", 15),
    ("Data", 12),
    ("Hora", 10),
    ("Tipo", 10),
    ("Latitude", 12),
    ("Longitude", 12),
    ("Link Mapa", 50),
)

MIN_PASSWORD_LENGTH = 4

# Upper bound on threads running location providers at once.
GEO_PROBE_WORKERS = 4
