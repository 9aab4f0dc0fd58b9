# Middleware package init
"""
PageMeta — Middleware Package
=============================

What:  The Starlette middleware that runs the pagination pipeline.
Why:   Pagination bookkeeping is needed on every list route; middleware keeps
       it out of the handlers.

Position in a host's chain:
    Request → [... host middleware ...] → [Pagination] → Route Handler

    Register it LAST (innermost) when other middleware compresses or
    otherwise rewrites response bodies: the envelope must be applied to the
    plain JSON body before any encoding. For example GZip must run outside
    (added before) the pagination middleware.
"""
