from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import os
import time
import urllib.parse
from typing import Any, Dict, Optional

import requests
import streamlit as st

COOKIE_NAME = "fb_auth"
TOKEN_TTL_SECONDS = 30 * 24 * 3600

logger = logging.getLogger(__name__)


def _get_secret(key: str) -> Optional[str]:
    """Read a Streamlit secret, or None when there is no secrets.toml or no such key."""
    try:
        sec = getattr(st, "secrets", None)
        return sec.get(key, None) if sec else None  # type: ignore[no-any-return]
    except Exception:
        # st.secrets raises when no secrets file exists at all
        return None


def _setting(*keys: str) -> Optional[str]:
    for key in keys:
        value = os.environ.get(key) or _get_secret(key)
        if value:
            return value
    return None


class AuthSettings:
    def __init__(self) -> None:
        self.domain = _setting("AUTH0_DOMAIN")
        self.client_id = _setting("AUTH0_CLIENT_ID")
        self.client_secret = _setting("AUTH0_CLIENT_SECRET")
        self.callback_url = _setting("AUTH0_CALLBACK_URL")
        self.dev_password = _setting("DEV_LOGIN_PASSWORD")
        self.cookie_secret = _setting("AUTH_COOKIE_SECRET", "AUTH0_CLIENT_SECRET", "DEV_LOGIN_PASSWORD")

    @property
    def auth0_enabled(self) -> bool:
        return bool(self.domain and self.client_id and self.client_secret and self.callback_url)


# ===== Signed session tokens (HS256) =====

def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_json(obj: Dict[str, Any]) -> str:
    return _b64url(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


def _b64url_decode(part: str) -> bytes:
    return base64.urlsafe_b64decode(part + "=" * (-len(part) % 4))


def issue_token(secret: str, user: Dict[str, Any], ttl_seconds: int = TOKEN_TTL_SECONDS,
                now: int | None = None) -> str:
    issued = int(time.time()) if now is None else now
    header = {"alg": "HS256", "typ": "JWT"}
    payload = {
        "sub": user.get("sub"),
        "name": user.get("name"),
        "provider": user.get("provider", "unknown"),
        "iat": issued,
        "exp": issued + int(ttl_seconds),
    }
    signing_input = f"{_b64url_json(header)}.{_b64url_json(payload)}".encode("ascii")
    sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{signing_input.decode('ascii')}.{_b64url(sig)}"


def verify_token(secret: str, token: str, now: int | None = None) -> Optional[Dict[str, Any]]:
    """Return the payload of a valid, unexpired token signed with `secret`, else None."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    try:
        signing_input = f"{parts[0]}.{parts[1]}".encode("ascii")
        expected = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
        sig = _b64url_decode(parts[2])
        data = json.loads(_b64url_decode(parts[1]).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not hmac.compare_digest(sig, expected) or not isinstance(data, dict):
        return None
    current = int(time.time()) if now is None else now
    if "exp" in data and current > int(data["exp"]):
        return None
    return data


# ===== Browser cookie helpers =====

def _set_cookie_js(name: str, value: str, max_age: int = TOKEN_TTL_SECONDS) -> None:
    js = f"""
    <script>
      try {{
        var parts = ['{name}=' + encodeURIComponent('{value}'), 'path=/', 'max-age={max_age}', 'samesite=Lax'];
        if (window.location.protocol === 'https:') parts.push('secure');
        document.cookie = parts.join('; ');
      }} catch (e) {{ console.warn('cookie set failed', e); }}
    </script>
    """
    st.markdown(js, unsafe_allow_html=True)


def _inject_cookie_to_query(name: str) -> None:
    # Reload with ?auth=<token> when the cookie exists so the server can verify it
    js = f"""
    <script>
      try {{
        const qs = new URLSearchParams(window.location.search);
        const m = document.cookie.match(new RegExp('(?:^|; ){name}=([^;]*)'));
        if (!qs.has('auth') && m) {{
          const url = new URL(window.location.href);
          url.searchParams.set('auth', decodeURIComponent(m[1]));
          window.location.replace(url.toString());
        }}
      }} catch (e) {{ console.warn('cookie->query failed', e); }}
    </script>
    """
    st.markdown(js, unsafe_allow_html=True)


def _query_param(name: str) -> Optional[str]:
    value = st.query_params.get(name)
    return value if isinstance(value, str) and value else None


def _authenticate_via_query(settings: AuthSettings) -> bool:
    tok = _query_param("auth")
    if not tok or not settings.cookie_secret:
        return False
    data = verify_token(settings.cookie_secret, tok)
    if not data or not data.get("sub"):
        logger.info("Ignoring invalid or expired session token")
        return False
    st.session_state["user"] = {
        "sub": data["sub"],
        "name": data.get("name") or "User",
        "email": "",
        "provider": data.get("provider") or "cookie",
    }
    st.query_params.clear()
    return True


# ===== Auth0 and DEV login =====

def _auth0_login_button(settings: AuthSettings) -> None:
    auth_url = f"https://{settings.domain}/authorize?" + urllib.parse.urlencode(
        {
            "response_type": "code",
            "client_id": settings.client_id or "",
            "redirect_uri": settings.callback_url or "",
            "scope": "openid profile email",
        }
    )
    st.link_button("Sign in with Auth0 (Google, etc.)", auth_url, use_container_width=True)
    st.info("Use the button above to sign in. After login, you will be redirected back here.")


def _auth0_exchange_code(settings: AuthSettings, code: str) -> Optional[dict]:
    try:
        resp = requests.post(
            f"https://{settings.domain}/oauth/token",
            data={
                "grant_type": "authorization_code",
                "client_id": settings.client_id,
                "client_secret": settings.client_secret,
                "code": code,
                "redirect_uri": settings.callback_url,
            },
            timeout=15,
        )
        resp.raise_for_status()
        access_token = resp.json().get("access_token")
        if not access_token:
            logger.error("Auth0 token response had no access_token")
            return None
        r2 = requests.get(
            f"https://{settings.domain}/userinfo",
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=15,
        )
        r2.raise_for_status()
        userinfo = r2.json()
    except requests.RequestException as e:
        logger.error("Auth0 sign-in failed: %s", e)
        return None
    return {
        "sub": userinfo.get("sub"),
        "name": userinfo.get("name") or userinfo.get("nickname") or "User",
        "email": userinfo.get("email") or "",
        "provider": "auth0",
    }


def _dev_login(settings: AuthSettings) -> Optional[dict]:
    st.write("Developer login (temporary)")
    pw = st.text_input("Enter access password", type="password")
    if st.button("Sign in", type="primary"):
        expected = settings.dev_password or ""
        if expected and hmac.compare_digest(pw, expected):
            return {"sub": "dev:user", "name": "Developer", "email": "dev@example.com", "provider": "dev"}
        st.error("Invalid password.")
    return None


# ===== Main flow =====

def _after_login_success(settings: AuthSettings, user: Dict[str, Any]) -> None:
    st.session_state["user"] = user
    if settings.cookie_secret:
        _set_cookie_js(COOKIE_NAME, issue_token(settings.cookie_secret, user))
    st.query_params.clear()
    st.rerun()


def current_user_id() -> Optional[str]:
    user = st.session_state.get("user") or {}
    return user.get("sub") or None


def sign_out() -> None:
    st.session_state.pop("user", None)
    _set_cookie_js(COOKIE_NAME, "", max_age=0)


def require_login() -> None:
    """Gate the page behind authentication.
    Auth0 code flow when configured, otherwise a DEV password gate.
    On success st.session_state["user"] is set; otherwise the script stops.
    """
    if current_user_id():
        return

    settings = AuthSettings()
    if _authenticate_via_query(settings):
        return
    _inject_cookie_to_query(COOKIE_NAME)

    st.markdown("## 🔒 Sign in to continue")

    if not settings.auth0_enabled:
        user = _dev_login(settings)
        if user:
            _after_login_success(settings, user)
        st.stop()

    code = _query_param("code")
    if not code:
        _auth0_login_button(settings)
        st.stop()
    st.caption("Completing sign-in…")
    user = _auth0_exchange_code(settings, code)
    if user:
        _after_login_success(settings, user)
    st.error("Sign-in failed. Please try again.")
    _auth0_login_button(settings)
    st.stop()
