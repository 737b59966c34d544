from __future__ import annotations

from typing import Any

from synpull.domain.model import Post, TermRef
from synpull.domain.ports.hooks import PreCommitHooks
from synpull.domain.pulling import PullContext

CONTEXT = PullContext(site_id=7, transport_type="rss")


def test_default_hooks_are_identity() -> None:
    hooks = PreCommitHooks()
    post = Post(remote_id="x")
    payload = {"title": "T"}
    meta = {"k": "v"}
    terms: dict[str, list[TermRef]] = {"category": ["News"]}

    assert hooks.before_insert_post(payload, CONTEXT) is payload
    assert hooks.before_update_meta(meta, post, CONTEXT) is meta
    assert hooks.before_set_terms(terms, post, CONTEXT) is terms


def test_chain_runs_hooks_in_order() -> None:
    def add_prefix(payload: dict[str, Any], context: PullContext) -> dict[str, Any]:
        return {**payload, "title": f"[{context.site_id}] {payload['title']}"}

    def shout(payload: dict[str, Any], context: PullContext) -> dict[str, Any]:
        _ = context
        return {**payload, "title": payload["title"].upper()}

    def tag_meta(meta: dict[str, Any], post: Post, context: PullContext) -> dict[str, Any]:
        _ = context
        return {**meta, "origin": post.remote_id}

    hooks = PreCommitHooks.chain(
        PreCommitHooks(before_insert_post=add_prefix, before_update_meta=tag_meta),
        PreCommitHooks(before_insert_post=shout),
    )

    assert hooks.before_insert_post({"title": "hello"}, CONTEXT) == {"title": "[7] HELLO"}
    assert hooks.before_update_meta({}, Post(remote_id="r1"), CONTEXT) == {"origin": "r1"}


def test_chain_without_hooks_is_identity() -> None:
    payload = {"title": "T"}

    assert PreCommitHooks.chain().before_insert_post(payload, CONTEXT) is payload
