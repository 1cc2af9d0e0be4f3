# Award pipeline package init
"""
AwardBoard Backend - Award Pipeline
=====================================

What:  Computes exactly one HTTP status "award" per request, records it for
       the authenticated requester, and renders the matching page.

Pipeline:
    identity restore → length_guard → body_size_guard → route handler
        → method_guard → fallback → record_award → render_award

    context.py     AwardContext and the Pending | Terminal(code) outcome
    classifier.py  guard, method and fallback stages
    recorder.py    award set insertion
    responder.py   code → page mapping

The orchestration lives in awardboard.middleware.award_pipeline.
"""
