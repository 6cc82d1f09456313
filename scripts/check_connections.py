#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB and the Hugging Face router are reachable.
Usage: python scripts/check_connections.py
"""

from credhub.core.config import get_settings
from credhub.db.mongodb import test_mongo_connection
from credhub.services.hf_client import get_hf_client


def main():
    settings = get_settings()
    print("=" * 50)
    print("CREDENTIAL HUB - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    MongoDB: CONNECTED")
    else:
        print("    MongoDB: FAILED")

    print("\n[2] Checking Hugging Face router...")
    client = get_hf_client()
    if client.enabled:
        print(f"    Base URL: {settings.hf_chat_base_url}")
        print(f"    Model: {settings.text_generation_model}")
        if client.test_connection():
            print("    Hugging Face: CONNECTED")
        else:
            print("    Hugging Face: FAILED (rule-based fallbacks will be used)")
    else:
        print("    Hugging Face: HF_API_KEY not configured (rule-based fallbacks only)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
