#!/usr/bin/env python3
"""Helper script to check provider configuration and create a template .env file."""

from pathlib import Path
import sys

TEMPLATE = """# Geocoding provider (optional - static city/ZIP tables are used without it)
BACKHAUL_MAPBOX_TOKEN=your_mapbox_public_token

# Truck routing provider (optional - straight-line distances are used without it)
BACKHAUL_PCMILER_API_KEY=

# API Configuration
BACKHAUL_API_PREFIX=/api
# BACKHAUL_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list

# Data Paths
BACKHAUL_DATA_ROOT=./data
BACKHAUL_LOADS_FILE=./data/backhaul_loads.json

# Corridor cache lifetime in seconds
BACKHAUL_CORRIDOR_CACHE_TTL_SECONDS=3600
"""


def _mask(value: str) -> str:
    return value[:8] + "..." + value[-4:] if len(value) > 16 else value


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Backhaul Finder Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        with open(env_file, "w", encoding="utf-8") as f:
            f.write(TEMPLATE)
        print(f"✅ Created template .env file at: {env_file}")
        print("⚠️  Edit it to add your Mapbox token and PC*Miler API key.")
        return

    print(f"✅ Found .env file at: {env_file}")
    print()

    try:
        sys.path.insert(0, str(project_root / "src"))
        from backhaul.config import settings
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return

    if settings.geocoding_configured:
        print(f"✅ Mapbox token: {_mask(settings.mapbox_token)}")
    else:
        print("❌ Mapbox token not configured - geocoding will use the fallback tables")

    if settings.pcmiler_api_key:
        print(f"✅ PC*Miler key: {_mask(settings.pcmiler_api_key)}")
    else:
        print("❌ PC*Miler key not configured - routes fall back to straight lines")

    if settings.loads_file.exists():
        print(f"✅ Loads file: {settings.loads_file}")
    else:
        print(f"❌ Loads file not found: {settings.loads_file}")


if __name__ == "__main__":
    main()
