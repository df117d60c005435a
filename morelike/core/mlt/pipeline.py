from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from ...errors import ValidationError
from ...observability.obs import api as obs
from .models import (
    MatchNoDocsQuery,
    QueryContext,
    ResolvedRequest,
    SimilarityQuery,
)
from .resolver import resolve_items
from .stages import (
    compute_exclusion,
    distribute_responses,
    fetch_term_vectors,
    remove_unsupported_fields,
    resolve_analyzer,
    resolve_fields,
)

if TYPE_CHECKING:
    from .builder import MoreLikeThisQueryBuilder


BuildResult = Union[SimilarityQuery, MatchNoDocsQuery]


@dataclass
class SimilarityPipeline:
    """Turns a query definition into a similarity query.

    Stages:
    - stage.resolve_fields
    - stage.resolve_items
    - stage.filter_fields (only when raw texts are present)
    - stage.fetch (only when there are documents to fetch)
    - stage.exclude
    - stage.build
    """

    def run(self, builder: "MoreLikeThisQueryBuilder", context: QueryContext) -> BuildResult:
        if builder.fields is not None and not builder.fields:
            raise ValidationError("more_like_this requires 'fields' to be non-empty")

        with obs.with_stage("resolve_fields"):
            analyzer = resolve_analyzer(context.analysis, builder.analyzer)
            fields, use_default_field = resolve_fields(builder.fields, context.default_field)

        with obs.with_stage("resolve_items"):
            like = self._resolve(builder.like_items, context, fields, use_default_field)
            ignore = self._resolve(builder.ignore_items, context, fields, use_default_field)
            obs.event(
                "mlt.items_resolved",
                {
                    "like_requests": len(like.requests),
                    "like_texts": len(like.like_texts),
                    "ignore_requests": len(ignore.requests),
                    "ignore_texts": len(ignore.like_texts),
                },
            )

        query = SimilarityQuery(
            analyzer=analyzer,
            fields=fields,
            like_texts=like.like_texts,
            ignore_texts=ignore.like_texts,
        )

        if like.like_texts or ignore.like_texts:
            with obs.with_stage("filter_fields"):
                kept = remove_unsupported_fields(fields, analyzer, context.probe, builder.fail_on_unsupported_field)
                obs.event("mlt.fields_filtered", {"before": list(fields), "after": list(kept)})
                fields = kept
                query.fields = fields

        requests = like.requests + ignore.requests
        # (nothing to fetch and no texts) or (texts but no fields)
        if not requests and not like.like_texts or like.like_texts and not fields:
            reason = "no_fields" if like.like_texts else "no_items"
            obs.event("mlt.match_none", {"reason": reason})
            return MatchNoDocsQuery(reason=reason)

        if requests:
            with obs.with_stage("fetch", {"requests": len(requests)}):
                responses = fetch_term_vectors(context.fetcher, like.requests, ignore.requests)
                query.like_fields, query.ignore_fields = distribute_responses(responses, len(like.requests))
                obs.event(
                    "mlt.fetched",
                    {"requests": len(responses), "found": sum(1 for r in responses if r.found)},
                )

            if not builder.include:
                with obs.with_stage("exclude"):
                    uids = compute_exclusion(like.requests, context.uid_encoder)
                    if uids:
                        query.exclude_uids = uids
                    obs.event("mlt.excluded", {"count": len(uids)})

        with obs.with_stage("build"):
            self._apply_tunables(builder, query)
            if builder.query_name is not None:
                context.add_named_query(builder.query_name, query)
                obs.event("mlt.named_query", {"name": builder.query_name})
        return query

    @staticmethod
    def _resolve(items, context: QueryContext, fields, use_default_field: bool) -> ResolvedRequest:
        return resolve_items(
            items,
            default_index=context.index_name,
            query_types=context.query_types,
            fields=fields,
            use_default_field=use_default_field,
        )

    @staticmethod
    def _apply_tunables(builder: "MoreLikeThisQueryBuilder", query: SimilarityQuery) -> None:
        # -1 means unset; the query keeps the executor default.
        if builder.min_term_freq != -1:
            query.min_term_freq = builder.min_term_freq
        if builder.max_query_terms != -1:
            query.max_query_terms = builder.max_query_terms
        if builder.min_doc_freq != -1:
            query.min_doc_freq = builder.min_doc_freq
        if builder.max_doc_freq != -1:
            query.max_doc_freq = builder.max_doc_freq
        if builder.min_word_length != -1:
            query.min_word_len = builder.min_word_length
        if builder.max_word_length != -1:
            query.max_word_len = builder.max_word_length
        if builder.boost_terms > 0:
            query.boost_terms = True
            query.boost_terms_factor = builder.boost_terms
        if builder.minimum_should_match is not None:
            query.minimum_should_match = builder.minimum_should_match
        if builder.stop_words is not None:
            query.stop_words = frozenset(builder.stop_words)
        # An unset or non-positive boost keeps the default.
        if builder.boost is not None and builder.boost > 0:
            query.boost = builder.boost
        query.query_name = builder.query_name
