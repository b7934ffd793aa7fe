"""
Payload encoding for each QR code type.

Turns form fields into the string that goes into the QR image.
"""
from urllib.parse import quote

WIFI_SECURITY_TYPES = ('WPA', 'WEP', 'nopass')


def _escape_wifi(value: str) -> str:
    """Escape characters reserved by the WIFI: payload format."""
    for char in ('\\', ';', ',', ':', '"'):
        value = value.replace(char, f'\\{char}')
    return value


def _query(**params) -> str:
    parts = [f'{key}={quote(value)}' for key, value in params.items() if value]
    return f"?{'&'.join(parts)}" if parts else ''


def build_url(url: str = '', **_) -> str:
    return url.strip()


def build_text(text: str = '', **_) -> str:
    return text


def build_email(email: str = '', subject: str = '', message: str = '', **_) -> str:
    return f'mailto:{email.strip()}' + _query(subject=subject, body=message)


def build_phone(phone: str = '', **_) -> str:
    return f'tel:{phone.strip()}'


def build_sms(phone: str = '', message: str = '', **_) -> str:
    return f'sms:{phone.strip()}' + _query(body=message)


def build_wifi(
    wifi_name: str = '',
    wifi_password: str = '',
    wifi_security: str = 'WPA',
    **_
) -> str:
    """
    Build a WIFI: payload understood by phone cameras.

    Args:
        wifi_name: Network name (SSID)
        wifi_password: Password, ignored for open networks
        wifi_security: WPA, WEP or nopass

    Returns:
        Payload like WIFI:T:WPA;S:home;P:secret;;
    """
    if wifi_security not in WIFI_SECURITY_TYPES:
        raise ValueError(f'Unknown WiFi security type: {wifi_security}')

    payload = f'WIFI:T:{wifi_security};S:{_escape_wifi(wifi_name)};'
    if wifi_security != 'nopass':
        payload += f'P:{_escape_wifi(wifi_password)};'
    return payload + ';'


BUILDERS = {
    'url': build_url,
    'text': build_text,
    'email': build_email,
    'phone': build_phone,
    'sms': build_sms,
    'wifi': build_wifi,
}


def build_content(qr_type: str, **fields) -> str:
    """Build the payload for qr_type from its form fields."""
    builder = BUILDERS.get(qr_type)
    if builder is None:
        raise ValueError(f'Unknown QR code type: {qr_type}')
    return builder(**fields)
