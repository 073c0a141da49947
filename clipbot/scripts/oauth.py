#!/usr/bin/env python3
"""Print the Twitch authorization URL used to obtain AUTHORIZATION_CODE."""

import os
import sys
from urllib.parse import quote

from dotenv import load_dotenv

from clipbot.core.config import BOT_SCOPES


def gen_url(cid: str, uri: str, scopes: list[str]) -> str:
    s = "+".join(s.replace(":", "%3A") for s in scopes)
    return f"https://id.twitch.tv/oauth2/authorize?client_id={cid}&redirect_uri={quote(uri, safe='')}&response_type=code&scope={s}"


def main() -> None:
    load_dotenv()

    cid = os.getenv("CLIENT_ID")
    if not cid:
        print("Error: CLIENT_ID not set")
        sys.exit(1)

    uri = os.getenv("REDIRECT_URI", "http://localhost")

    print("Open this URL while logged in as the bot account:")
    print(gen_url(cid, uri, BOT_SCOPES))
    print()
    print("Copy the 'code' query parameter of the redirect into AUTHORIZATION_CODE.")


if __name__ == "__main__":
    main()
