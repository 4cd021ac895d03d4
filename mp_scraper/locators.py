"""
locators.py — Markup conventions of Mercado Público bid pages.

The attachment grids are ASP.NET GridViews whose generated ids embed a
stable fragment, so tables are matched with `id*=` substring selectors.
If the platform renames a grid or its download handler, update the
strings here — no core logic changes needed.
"""

import re

# ═══════════════════════════════════════════════════════════════
# BID PAGE (DetailsAcquisition.aspx / Ficha)
# ═══════════════════════════════════════════════════════════════

# Attachment grid on the bid page itself
PRIMARY_TABLE_TOKEN = "grvAnexos"

# Query parameter of the bid page URL that carries the bid id
BID_ID_PARAM = "idlicitacion"

# Each row's download button:
#   <input type="image" onclick="fn_descargar_anexo_v2('1234567'); return false;">
DOWNLOAD_HANDLER_PATTERN = re.compile(r"""fn_descargar_anexo_v2\s*\(\s*['"]?(\d+)['"]?""")

# Backend endpoint that serves a single attachment (joined to PLATFORM_BASE_URL)
DOWNLOAD_DOC_PATH = "/Procurement/Modules/RFB/DownloadDoc.aspx"

# Link to the dedicated attachments page, when the bid has one
SECONDARY_PAGE_MARKER = "ViewAttachment.aspx"


# ═══════════════════════════════════════════════════════════════
# DEDICATED ATTACHMENTS PAGE (ViewAttachment.aspx)
# ═══════════════════════════════════════════════════════════════

SECONDARY_TABLE_TOKEN = "grdArchivos"

# Column indices (0-based) in the secondary grid
COL_SECONDARY_NAME = 0
COL_SECONDARY_LINK = 2
