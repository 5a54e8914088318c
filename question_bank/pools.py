"""Built-in question pools for the generalist full-stack role."""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class PoolQuestion(BaseModel):  # Bank entry before it is placed in a session
    text: str = Field(min_length=1)
    ideal_answer: str = ""


DEFAULT_ROLE = "Full Stack (React/Node)"

DEFAULT_POOLS: Dict[str, List[PoolQuestion]] = {
    "Easy": [
        PoolQuestion(
            text="What is the difference between let, const, and var in JavaScript?",
            ideal_answer=(
                "let and const are block-scoped and live in the temporal dead zone until declared; "
                "var is function-scoped and hoisted. const bindings cannot be reassigned."
            ),
        ),
        PoolQuestion(
            text="Explain how useState works in React.",
            ideal_answer=(
                "useState returns the current state value and a setter; calling the setter schedules a "
                "re-render, and the functional updater form avoids stale state."
            ),
        ),
        PoolQuestion(
            text="What is npm and what does package.json do?",
            ideal_answer=(
                "npm is the Node package manager; package.json declares metadata, scripts and dependency "
                "ranges, while the lockfile pins exact versions."
            ),
        ),
        PoolQuestion(
            text="How do you handle environment variables in a React + Vite app?",
            ideal_answer=(
                "Vite exposes variables prefixed with VITE_ through import.meta.env from .env files at build "
                "time; secrets must never be shipped to the client bundle."
            ),
        ),
    ],
    "Medium": [
        PoolQuestion(
            text="Describe how you would design a pagination API in Node/Express and consume it in React.",
            ideal_answer=(
                "Expose limit plus cursor or offset parameters, return items with a next cursor and total, "
                "index the sort key, and fetch pages in React with loading and error states."
            ),
        ),
        PoolQuestion(
            text="What are React keys and why are they important? Provide pitfalls.",
            ideal_answer=(
                "Keys give list items a stable identity for reconciliation; using array indexes or random "
                "values breaks state preservation and causes needless re-mounts."
            ),
        ),
        PoolQuestion(
            text="Explain middleware in Express and give a real-world example.",
            ideal_answer=(
                "Middleware are functions with req, res and next that run in order; examples include "
                "authentication, logging, body parsing and centralized error handling."
            ),
        ),
        PoolQuestion(
            text="How would you debounce a search input in React without external libs?",
            ideal_answer=(
                "Keep the input value in state and start a setTimeout in useEffect that is cleared on each "
                "change, issuing the search only after the delay elapses."
            ),
        ),
    ],
    "Hard": [
        PoolQuestion(
            text="Design a production-grade authentication flow for a React/Node app (tokens, refresh, cookies, CSRF).",
            ideal_answer=(
                "Short-lived access tokens with rotating refresh tokens in httpOnly secure SameSite cookies, "
                "CSRF tokens for cookie-authenticated writes, revocation and rate limiting."
            ),
        ),
        PoolQuestion(
            text="How would you scale a chat service (WebSockets, backpressure, horizontal scaling)?",
            ideal_answer=(
                "Stateless socket nodes behind a load balancer with a pub/sub fan-out layer, per-connection "
                "buffers with backpressure, presence in a shared store and horizontal autoscaling."
            ),
        ),
        PoolQuestion(
            text="Explain React concurrent features and how they impact large forms or dashboards.",
            ideal_answer=(
                "Concurrent rendering lets React interrupt work; startTransition and useDeferredValue keep "
                "inputs responsive while expensive dashboard updates render at lower priority."
            ),
        ),
        PoolQuestion(
            text="Outline an indexing strategy for a MongoDB collection that supports text search and range filters.",
            ideal_answer=(
                "A text index for search plus compound indexes ordered by equality, sort, then range fields; "
                "verify with explain plans and keep indexes selective."
            ),
        ),
    ],
}

FALLBACK_QUESTIONS: List[Dict[str, str]] = [
    {
        "text": "What is the difference between let, const, and var in JavaScript?",
        "difficulty": "Easy",
        "ideal_answer": "let and const are block-scoped while var is function-scoped. const cannot be reassigned after declaration.",
    },
    {
        "text": "Explain the concept of React components and their lifecycle.",
        "difficulty": "Easy",
        "ideal_answer": "React components are reusable pieces of UI. They mount, update and unmount, with effects running after render.",
    },
    {
        "text": "How would you implement user authentication in a React/Node.js application?",
        "difficulty": "Medium",
        "ideal_answer": "Use JWT tokens, implement login/logout endpoints, store tokens securely, and protect routes on both frontend and backend.",
    },
    {
        "text": "Explain the difference between SQL and NoSQL databases and when to use each.",
        "difficulty": "Medium",
        "ideal_answer": "SQL databases are relational with structured schema, NoSQL are flexible. Use SQL for complex relationships, NoSQL for scalability.",
    },
    {
        "text": "Design a scalable system for handling millions of user requests per day.",
        "difficulty": "Hard",
        "ideal_answer": "Use load balancers, microservices, caching layers, database sharding, CDNs, and horizontal scaling strategies.",
    },
    {
        "text": "Explain how you would optimize a slow-performing React application.",
        "difficulty": "Hard",
        "ideal_answer": "Use React.memo, useMemo, useCallback, code splitting, lazy loading, optimize bundle size, and implement virtual scrolling.",
    },
]


__all__ = ["PoolQuestion", "DEFAULT_ROLE", "DEFAULT_POOLS", "FALLBACK_QUESTIONS"]
