"""
QR Code image rendering.

All image generation lives here; views and record operations only pass
payloads in and get PNG data back.
"""
import io
import re
import base64
import qrcode
from PIL import Image


class QRGeneratorService:
    """Renders QR payloads to PNG with optional colors."""

    DEFAULT_FILL_COLOR = 'black'
    DEFAULT_BACK_COLOR = 'white'
    BOX_SIZE = 10
    BORDER = 2

    @staticmethod
    def validate_color(color: str, default: str) -> str:
        """Validate a color (hex or named)."""
        if not color:
            return default
        color = color.strip()
        if re.match(r'^#[0-9A-Fa-f]{6}$', color):
            return color
        if re.match(r'^[a-zA-Z]+$', color):
            return color
        return default

    @classmethod
    def generate(
        cls,
        data: str,
        fill_color: str = None,
        back_color: str = None,
    ) -> Image.Image:
        """
        Render a QR code.

        Args:
            data: Payload to encode
            fill_color: Module color (hex or name)
            back_color: Background color (hex or name)

        Returns:
            PIL Image
        """
        fill_color = cls.validate_color(fill_color, cls.DEFAULT_FILL_COLOR)
        back_color = cls.validate_color(back_color, cls.DEFAULT_BACK_COLOR)

        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=cls.BOX_SIZE,
            border=cls.BORDER,
        )
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color=fill_color, back_color=back_color)

        return img.convert('RGB')

    @classmethod
    def generate_to_buffer(cls, data: str, **kwargs) -> io.BytesIO:
        """Render to an in-memory PNG."""
        img = cls.generate(data, **kwargs)
        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        buffer.seek(0)
        return buffer

    @classmethod
    def generate_to_base64(cls, data: str, **kwargs) -> str:
        """Render to a base64 PNG string."""
        buffer = cls.generate_to_buffer(data, **kwargs)
        return base64.b64encode(buffer.getvalue()).decode()

    @classmethod
    def generate_to_data_url(cls, data: str, **kwargs) -> str:
        """Render to a data: URL suitable for an <img> src."""
        return f'data:image/png;base64,{cls.generate_to_base64(data, **kwargs)}'
