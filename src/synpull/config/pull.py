"""Defaults for site pulls."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_list

IDENTIFIER_META_KEY = "syn_identifier"
TRANSPORT_TYPE_OPTION = "syn_transport_type"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0
DEFAULT_TAXONOMIES: tuple[str, ...] = ("category", "post_tag")


@dataclass(frozen=True, slots=True)
class PullConfig:
    fail_fast: bool = True
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    taxonomies: tuple[str, ...] = DEFAULT_TAXONOMIES
    identifier_meta_key: str = IDENTIFIER_META_KEY
    transport_type_option: str = TRANSPORT_TYPE_OPTION


def get_pull_config() -> PullConfig:
    return PullConfig(
        fail_fast=env_bool("SYNPULL_FAIL_FAST", default=True),
        http_timeout_seconds=env_float(
            "SYNPULL_HTTP_TIMEOUT", default=DEFAULT_HTTP_TIMEOUT_SECONDS
        ),
        taxonomies=env_list("SYNPULL_TAXONOMIES", default=DEFAULT_TAXONOMIES),
    )
