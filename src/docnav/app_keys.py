"""Application keys for type-safe app configuration access."""

from aiohttp import web

from docnav.config import Config
from docnav.core.navigation import Sidebar
from docnav.core.state import TreeStateStore
from docnav.live.hub import ConnectionHub
from docnav.live.reload import LiveReloadManager

config_key = web.AppKey("config", Config)
sidebar_key = web.AppKey("sidebar", Sidebar)
store_key = web.AppKey("store", TreeStateStore)
hub_key = web.AppKey("hub", ConnectionHub)
verbose_key = web.AppKey("verbose", bool)
live_reload_key = web.AppKey("live_reload", LiveReloadManager)
