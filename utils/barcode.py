# utils/barcode.py

import io

from barcode import Code128
from barcode.writer import ImageWriter


def barcode_png(sku: str) -> bytes:
    """
    Render a Code128 label for `sku` as PNG bytes (shown with st.image and
    offered as a download on the inventory page).
    """
    if not sku or not isinstance(sku, str):
        raise ValueError("sku must be a non-empty string")

    buffer = io.BytesIO()
    Code128(sku, writer=ImageWriter()).write(buffer)
    return buffer.getvalue()
