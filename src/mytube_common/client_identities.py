"""Known upstream client identities and the headers each one presents."""

from enum import Enum

YOUTUBE_ORIGIN = "https://www.youtube.com"


class ClientIdentity(str, Enum):
    """Upstream client applications, named after yt-dlp ``player_client`` values."""

    TV = "tv"
    WEB_SAFARI = "web_safari"
    MWEB = "mweb"
    WEB = "web"
    IOS = "ios"
    ANDROID = "android"
    ANDROID_VR = "android_vr"


# (User-Agent, X-YouTube-Client-Name, X-YouTube-Client-Version)
_IDENTITY_PROFILES: dict[ClientIdentity, tuple[str, str, str]] = {
    ClientIdentity.TV: (
        "Mozilla/5.0 (ChromiumStylePlatform) Cobalt/Version",
        "7",
        "7.20240724.13.00",
    ),
    ClientIdentity.WEB_SAFARI: (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.5 Safari/605.1.15,gzip(gfe)",
        "1",
        "2.20240726.00.00",
    ),
    ClientIdentity.MWEB: (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1",
        "2",
        "2.20240726.01.00",
    ),
    ClientIdentity.WEB: (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
        "1",
        "2.20240726.00.00",
    ),
    ClientIdentity.IOS: (
        "com.google.ios.youtube/19.29.1 (iPhone16,2; U; CPU iOS 17_5_1 like Mac OS X;)",
        "5",
        "19.29.1",
    ),
    ClientIdentity.ANDROID: (
        "com.google.android.youtube/19.29.37 (Linux; U; Android 14; en_US) gzip",
        "3",
        "19.29.37",
    ),
    ClientIdentity.ANDROID_VR: (
        "com.google.android.apps.youtube.vr.oculus/1.57.29 "
        "(Linux; U; Android 12L; eureka-user Build/SQ3A.220605.009.A1) gzip",
        "28",
        "1.57.29",
    ),
}


def spoofed_headers(identity: ClientIdentity) -> dict[str, str]:
    """Returns the header set that makes a request look like ``identity``."""
    user_agent, client_name, client_version = _IDENTITY_PROFILES[identity]
    return {
        "User-Agent": user_agent,
        "Accept": "*/*",
        "Accept-Language": "en-US,en;q=0.9",
        "Origin": YOUTUBE_ORIGIN,
        "Referer": f"{YOUTUBE_ORIGIN}/",
        "X-YouTube-Client-Name": client_name,
        "X-YouTube-Client-Version": client_version,
    }
