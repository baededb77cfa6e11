"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from vidshare.config import PROJECT_ROOT, load_settings
from vidshare.domain.validation import MB

ENV_VARS = [
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_ANON_KEY",
    "NEXT_PUBLIC_SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_ANON_KEY",
    "VIDEOS_TABLE",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "MEDIA_URI",
    "MEDIA_BUCKET",
    "MEDIA_PUBLIC_BASE_URL",
    "MAX_VIDEO_BYTES",
    "MAX_THUMBNAIL_BYTES",
    "MAX_REQUEST_BYTES",
    "CLEANUP_ORPHANED_MEDIA",
    "CORS_ALLOW_ORIGINS",
    "HOST",
    "PORT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # setenv first so teardown also removes anything load_dotenv adds
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # point dotenv at an empty file so a developer's .env does not leak in
    empty = tmp_path / ".env"
    empty.write_text("", encoding="utf-8")
    return empty


def test_defaults(clean_env):
    settings = load_settings(clean_env)

    assert settings.supabase_url is None
    assert settings.videos_table == "videos"
    assert settings.media_bucket == "vidshare-media"
    assert settings.google_credentials_path == PROJECT_ROOT / "key.json"
    assert settings.max_video_bytes == 100 * MB
    assert settings.max_thumbnail_bytes == 10 * MB
    assert settings.max_request_bytes == 111 * MB
    assert settings.cleanup_orphaned_media is True
    assert settings.cors_allow_origins == ("http://localhost:3000", "http://127.0.0.1:3000")
    assert settings.port == 8000


def test_overrides(clean_env, monkeypatch, tmp_path):
    key = tmp_path / "service.json"
    monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(key))
    monkeypatch.setenv("MEDIA_URI", "gs://my-bucket/some/folder")
    monkeypatch.setenv("MAX_VIDEO_BYTES", str(50 * MB))
    monkeypatch.setenv("MAX_THUMBNAIL_BYTES", str(5 * MB))
    monkeypatch.setenv("CLEANUP_ORPHANED_MEDIA", "no")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings(clean_env)

    assert settings.supabase_url == "https://x.supabase.co"
    assert settings.supabase_key == "anon"
    assert settings.google_credentials_path == key
    assert settings.media_bucket == "my-bucket"
    assert settings.max_request_bytes == 56 * MB
    assert settings.cleanup_orphaned_media is False
    assert settings.cors_allow_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "DEBUG"
    assert settings.upload_policy.max_video_bytes == 50 * MB
    assert settings.upload_policy.max_thumbnail_bytes == 5 * MB


def test_values_from_env_file(clean_env, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("MEDIA_BUCKET=from-file\nPORT=9000\n", encoding="utf-8")

    settings = load_settings(env_file)

    assert settings.media_bucket == "from-file"
    assert settings.port == 9000


@pytest.mark.parametrize("name, value", [("PORT", "eighty"), ("CLEANUP_ORPHANED_MEDIA", "maybe")])
def test_invalid_values_name_the_variable(clean_env, monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        load_settings(clean_env)
