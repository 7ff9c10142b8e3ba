#!/usr/bin/env python3
"""
Metrics definitions for the Gemini chat proxy.
"""

import prometheus_client

UPSTREAM_REQUESTS = prometheus_client.Counter(
    'gemini_upstream_requests_total',
    'Requests forwarded to the Gemini API, by upstream status code or "error"',
    ['outcome'],
)
UPSTREAM_LATENCY = prometheus_client.Histogram(
    'gemini_upstream_request_seconds', 'Time spent waiting for the Gemini API'
)
TOKENS_SENT = prometheus_client.Counter(
    'gemini_prompt_tokens_total', 'Prompt tokens reported by the Gemini API'
)
TOKENS_RECEIVED = prometheus_client.Counter(
    'gemini_candidate_tokens_total', 'Candidate tokens reported by the Gemini API'
)
REJECTED_REQUESTS = prometheus_client.Counter(
    'proxy_rejected_requests_total', 'Requests answered without contacting the Gemini API', ['reason']
)
