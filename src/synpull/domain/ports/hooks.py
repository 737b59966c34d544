"""Pre-commit transform hooks applied by the post reconciler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from synpull.domain.model import Post, TermRef
    from synpull.domain.pulling.context import PullContext

    type PostDataHook = Callable[[dict[str, Any], PullContext], dict[str, Any]]
    type PostMetaHook = Callable[[dict[str, Any], Post, PullContext], dict[str, Any]]
    type PostTermsHook = Callable[
        [dict[str, list[TermRef]], Post, PullContext], dict[str, list[TermRef]]
    ]


def _keep_post_data(payload: dict[str, Any], context: PullContext) -> dict[str, Any]:
    _ = context
    return payload


def _keep_post_meta(
    metadata: dict[str, Any], post: Post, context: PullContext
) -> dict[str, Any]:
    _ = post, context
    return metadata


def _keep_post_terms(
    assignments: dict[str, list[TermRef]], post: Post, context: PullContext
) -> dict[str, list[TermRef]]:
    _ = post, context
    return assignments


@dataclass(frozen=True, slots=True)
class PreCommitHooks:
    """One transform per commit stage; each defaults to the identity."""

    before_insert_post: PostDataHook = _keep_post_data
    before_update_meta: PostMetaHook = _keep_post_meta
    before_set_terms: PostTermsHook = _keep_post_terms

    @classmethod
    def chain(cls, *hooks: PreCommitHooks) -> PreCommitHooks:
        """Compose hook sets so each stage runs them in the given order."""

        if not hooks:
            return cls()

        def before_insert_post(payload: dict[str, Any], context: PullContext) -> dict[str, Any]:
            for hook in hooks:
                payload = hook.before_insert_post(payload, context)
            return payload

        def before_update_meta(
            metadata: dict[str, Any], post: Post, context: PullContext
        ) -> dict[str, Any]:
            for hook in hooks:
                metadata = hook.before_update_meta(metadata, post, context)
            return metadata

        def before_set_terms(
            assignments: dict[str, list[TermRef]], post: Post, context: PullContext
        ) -> dict[str, list[TermRef]]:
            for hook in hooks:
                assignments = hook.before_set_terms(assignments, post, context)
            return assignments

        return cls(
            before_insert_post=before_insert_post,
            before_update_meta=before_update_meta,
            before_set_terms=before_set_terms,
        )
