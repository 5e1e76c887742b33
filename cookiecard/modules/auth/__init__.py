from cookiecard.modules.auth.application.security import create_session_token, decode_session_token

__all__ = ["create_session_token", "decode_session_token"]
