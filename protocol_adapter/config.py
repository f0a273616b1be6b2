# protocol_adapter/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Protocol manifest (devices, models, features, params)
PROTOCOL_CONFIG_PATH = os.getenv("PROTOCOL_CONFIG_PATH", "/app/config/protocol.yaml")

# 'static' builds the registry once at startup, 'per-call-snapshot' builds it from each call's snapshot
REGISTRY_SOURCE = os.getenv("REGISTRY_SOURCE", "static").lower()

# Platform envelope
ENVELOPE_VERSION = os.getenv("ENVELOPE_VERSION", "1.0.0")

# Service Config
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SERVICE_NAME = os.getenv("SERVICE_NAME", "protocol_adapter")
