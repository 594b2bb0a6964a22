"""Prometheus metric definitions for brandlens."""

from __future__ import annotations

from prometheus_client import Counter

# --- LLM tokens ---

llm_tokens_total = Counter(
    "brandlens_llm_tokens_total",
    "Total LLM tokens consumed",
    labelnames=["model", "token_type"],
)

# --- Generation ---

queries_generated_total = Counter(
    "brandlens_queries_generated_total",
    "Queries inserted by AI generation",
    labelnames=["source"],
)

duplicate_queries_dropped_total = Counter(
    "brandlens_duplicate_queries_dropped_total",
    "Generated queries discarded because the topic already had them",
)

# --- Background tasks ---

task_runs_total = Counter(
    "brandlens_task_runs_total",
    "Background task executions by outcome",
    labelnames=["task", "outcome"],
)

# --- Actions ---

actions_total = Counter(
    "brandlens_actions_total",
    "Form action invocations by outcome",
    labelnames=["action", "outcome"],
)
