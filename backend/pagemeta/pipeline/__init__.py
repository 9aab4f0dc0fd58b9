# Pipeline package init
"""
PageMeta — Pagination Pipeline
==============================

What:  The decision logic of the middleware, as plain functions.
Why:   Keeping Starlette out of these modules makes every rule testable
       with dicts and lists.

Pipeline (per request):
    Request  → [extractor]  page/limit parsed, stripped from the query
             → handler (host)
    Response ← [filter]     should this response be enriched?
             ← [composer]   wrap, merge or strip the metadata
"""
