# Shared fixtures: a scriptable fake of the Discord HTTP API.
#
# The fake is wired in through httpx.MockTransport, so every request the
# dashboard makes is answered in-process and recorded for assertions.

import json
import re
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from config import DashboardConfig
from dashboard import create_app
from discord_api import DiscordClient
from sessions import MemorySessionStore, SessionManager

TOKEN_PATH = "/api/oauth2/token"
API_PREFIX = "/api/v10"

USER_PROFILE = {
    "id": "80351110224678912",
    "username": "nelly",
    "avatar": "8342729096ea3675442027381ff50dfe",
    "discriminator": "1337",
    "email": "nelly@example.com",
}


def make_config(**overrides) -> DashboardConfig:
    values = {
        "client_id": "client-123",
        "client_secret": "client-secret-xyz",
        "bot_token": "bot-token-abc",
        "session_secret": "test-session-secret",
        "redirect_uri": "http://localhost:3000/callback",
        "static_dir": "/nonexistent/chatpulse-static",
    }
    values.update(overrides)
    return DashboardConfig(**values)


class FakeDiscord:
    """In-process stand-in for discord.com

    Attributes:
        user_guilds: Guild list returned for the user token
        bot_guilds: Guild ids the bot can read channels in
        probe_status: Per-guild status override for the channel probe
        channels: Per-guild channel lists
        messages: Per-channel message lists
        profiles: Per-access-token user profiles, falling back to user_profile
        token_status / user_status: Force an error status on those endpoints
        requests: Every request received, in order
    """

    def __init__(self):
        self.user_guilds = []
        self.bot_guilds = set()
        self.probe_status = {}
        self.probe_errors = {}
        self.channels = {}
        self.messages = {}
        self.user_profile = dict(USER_PROFILE)
        self.profiles = {}
        self.token_status = 200
        self.user_status = 200
        self.guilds_status = 200
        self.channels_status = 200
        self.messages_status = 200
        self.send_status = 200
        self.requests = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls_to(self, method: str, path: str):
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @property
    def token_calls(self):
        return self.calls_to("POST", TOKEN_PATH)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        auth = request.headers.get("authorization", "")

        if request.method == "POST" and path == TOKEN_PATH:
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            form = parse_qs(request.content.decode())
            return httpx.Response(200, json={
                "access_token": f"user-token-for-{form['code'][0]}",
                "token_type": "Bearer",
                "expires_in": 604800,
                "refresh_token": "refresh-token",
                "scope": "identify guilds",
            })

        if not path.startswith(API_PREFIX):
            return httpx.Response(404, json={"message": "Unknown route"})
        path = path[len(API_PREFIX):]

        if path == "/users/@me" and auth.startswith("Bearer "):
            if self.user_status != 200:
                return httpx.Response(self.user_status, json={"message": "401: Unauthorized"})
            token = auth[len("Bearer "):]
            return httpx.Response(200, json=self.profiles.get(token, self.user_profile))

        if path == "/users/@me/guilds" and auth.startswith("Bearer "):
            if self.guilds_status != 200:
                return httpx.Response(self.guilds_status, json={"message": "Rate limited"})
            return httpx.Response(200, json=self.user_guilds)

        if path == "/users/@me/guilds" and auth.startswith("Bot "):
            return httpx.Response(200, json=[{"id": gid, "name": f"guild-{gid}"} for gid in sorted(self.bot_guilds)])

        match = re.fullmatch(r"/guilds/(\d+)/channels", path)
        if match and auth.startswith("Bot "):
            guild_id = match.group(1)
            if guild_id in self.probe_errors:
                raise self.probe_errors[guild_id]
            if guild_id in self.probe_status:
                return httpx.Response(self.probe_status[guild_id], json={"message": "error"})
            if self.channels_status != 200:
                return httpx.Response(self.channels_status, json={"message": "error"})
            if guild_id not in self.bot_guilds:
                return httpx.Response(403, json={"message": "Missing Access", "code": 50001})
            return httpx.Response(200, json=self.channels.get(guild_id, []))

        match = re.fullmatch(r"/channels/(\d+)/messages", path)
        if match and auth.startswith("Bot "):
            channel_id = match.group(1)
            if request.method == "GET":
                if self.messages_status != 200:
                    return httpx.Response(self.messages_status, json={"message": "Missing Access"})
                return httpx.Response(200, json=self.messages.get(channel_id, []))
            if self.send_status != 200:
                return httpx.Response(self.send_status, json={"message": "Missing Permissions"})
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "1100000000000000001", "content": body["content"]})

        return httpx.Response(401, json={"message": "401: Unauthorized"})


def guild(guild_id: str, name: str, permissions: str, owner: bool = False) -> dict:
    return {
        "id": guild_id,
        "name": name,
        "icon": None,
        "owner": owner,
        "permissions": permissions,
        "features": [],
    }


@pytest.fixture
def fake_discord():
    return FakeDiscord()


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def discord_client(config, fake_discord):
    return DiscordClient(config, transport=fake_discord.transport)


@pytest.fixture
def session_store():
    return MemorySessionStore()


@pytest.fixture
def session_manager(config, session_store):
    return SessionManager(session_store, config.session_secret, config.session_ttl_seconds)


@pytest.fixture
def app(config, fake_discord, discord_client, session_manager):
    return create_app(
        config,
        discord_client=discord_client,
        session_manager=session_manager,
        token_transport=fake_discord.transport,
    )


@pytest.fixture
def client(app):
    return TestClient(app, follow_redirects=False)


def state_from_location(location: str) -> str:
    query = parse_qs(httpx.URL(location).query.decode())
    return query["state"][0]


def login(client: TestClient, code: str = "good-code") -> httpx.Response:
    """Run /login then /callback and return the callback response"""
    resp = client.get("/login")
    assert resp.status_code == 302
    state = state_from_location(resp.headers["location"])
    return client.get("/callback", params={"code": code, "state": state})
