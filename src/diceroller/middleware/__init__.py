"""
Middleware for the request pipeline.

    LoggingMiddleware  access log line per request
    CORSMiddleware     CORS headers, OPTIONS preflight, per-route opt-out
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware
from .cors import CORSMiddleware, CORSConfig

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "LoggingMiddleware",
    "CORSMiddleware",
    "CORSConfig",
]
