"""
Short-lived session tokens.

A token proves that ``(game_id, player_id)`` asked for a session inside a
recent time window. Nothing is stored server side: verification recomputes
the HMAC for the current window and the one before it.
"""
import base64
import hashlib
import hmac

DEFAULT_WINDOW_SECONDS = 180


def time_window(now_ms: int, window_seconds: int = DEFAULT_WINDOW_SECONDS) -> int:
    """Index of the fixed-width window containing ``now_ms``."""
    return int(now_ms) // (window_seconds * 1000)


def sign(secret: str, message: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def _message(game_id, player_id: str, window: int) -> str:
    return f"{game_id}:{player_id}:{window}"


def issue_token(
    secret: str,
    game_id,
    player_id: str,
    now_ms: int,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> str:
    """
    Issues the token for the window containing ``now_ms``.

    Args:
        secret: Server signing key
        game_id: Game identifier, as int or as its query-string form
        player_id: Player identifier, signed verbatim
        now_ms: Current time in epoch milliseconds
        window_seconds: Width of a window

    Returns:
        str: base64url HMAC-SHA256 without padding
    """
    tw = time_window(now_ms, window_seconds)
    return sign(secret, _message(game_id, player_id, tw))


def verify_token(
    secret: str,
    game_id,
    player_id: str,
    now_ms: int,
    token: str,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> bool:
    """
    True if ``token`` was issued in the current window or the previous one.

    Effective validity is between one and two windows depending on where in
    its window the token was issued.
    """
    if not isinstance(token, str) or not token:
        return False
    tw = time_window(now_ms, window_seconds)
    for window in (tw, tw - 1):
        expected = sign(secret, _message(game_id, player_id, window))
        if hmac.compare_digest(expected.encode("ascii"), token.encode("utf-8")):
            return True
    return False
