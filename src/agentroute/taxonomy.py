"""
Task Taxonomy — Keyword Classification of Free-Text Tasks

Buckets a task description into one intent with fixed precedence
(execution > blockchain query > analysis > general), tags target networks,
and derives the coarse analysis fields carried on every selection result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List

# ═══════════════════════════════════════════════════════════════════════════
# KEYWORD TABLES
# ═══════════════════════════════════════════════════════════════════════════

EXECUTION_VERBS: List[str] = ["transfer", "deploy", "mint", "execute"]

EXECUTION_KEYWORDS: List[str] = EXECUTION_VERBS + [
    "send", "swap", "stake", "bridge", "lend", "borrow", "provide liquidity",
]

BLOCKCHAIN_QUERY_KEYWORDS: List[str] = [
    "balance", "wallet", "address", "transaction", "history", "transfers",
    "gas", "block", "token info", "nft", "erc20", "erc721", "erc1155", "contract",
]

DEFI_KEYWORDS: List[str] = [
    "swap", "uniswap", "trade", "dex", "amm", "liquidity", "pool", "yield",
    "farm", "stake", "lend", "borrow", "collateral", "leverage", "polymarket",
    "prediction", "jupiter", "debridge", "1inch", "curve", "aave", "compound",
]

ANALYSIS_KEYWORDS: List[str] = [
    "analyze", "analyse", "research", "study", "investigate", "report", "market",
    "price", "trend", "data", "statistics", "compare", "evaluate", "assess", "audit",
]

BLOCKCHAIN_KEYWORDS: List[str] = [
    "blockchain", "crypto", "token", "wallet", "defi", "nft",
    "transaction", "contract", "swap", "bridge", "stake",
]

NETWORK_KEYWORDS: Dict[str, List[str]] = {
    "ethereum": ["ethereum", "eth", "mainnet"],
    "base": ["base network", "base chain", "on base"],
    "polygon": ["polygon", "matic"],
    "arbitrum": ["arbitrum", "arb", "layer 2"],
    "optimism": ["optimism", "optimistic"],
    "solana": ["solana", "sol"],
    "bsc": ["bsc", "binance", "bnb chain"],
    "avalanche": ["avalanche", "avax", "c-chain"],
    "camp": ["camp", "base camp", "camp network"],
}
DEFAULT_NETWORK = "camp"

# Requests about the routing system itself go to non-task agents.
INTERNAL_INDICATORS: List[str] = [
    "orchestrate", "coordinate", "delegate", "manage task", "system internal",
    "agent management", "prompt engineering", "memory management",
]

# indicator -> capability the rule-based scorer is asked for
INTERNAL_CATEGORIES: Dict[str, str] = {
    "orchestrate": "task_orchestration",
    "coordinate": "task_orchestration",
    "delegate": "agent_delegation",
    "manage task": "task_management",
    "system internal": "task_management",
    "agent management": "task_management",
    "prompt engineering": "prompt_engineering",
    "memory management": "memory_management",
}

CAPABILITY_HINTS: Dict[str, str] = {
    "transfer": "token_transfer",
    "deploy": "contract_deployment",
    "mint": "nft_mint",
    "balance": "balance_check",
    "swap": "token_swap",
    "audit": "security_audit",
}

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "blockchain": ["blockchain", "token", "nft", "crypto", "wallet", "defi"],
    "development": ["code", "develop", "program", "implement", "refactor"],
    "research": ["research", "analyze", "analyse", "investigate"],
}

COMPLEXITY_KEYWORDS: Dict[str, List[str]] = {
    "complex": ["architect", "design", "optimize", "multi-step", "strategy", "comprehensive", "then"],
    "simple": ["check", "show", "get", "list", "display", "what is", "how much"],
}

DURATION_BY_COMPLEXITY: Dict[str, str] = {
    "simple": "10-30s",
    "moderate": "1-2m",
    "complex": "2-5m",
}


class TaskIntent(StrEnum):
    """Mutually exclusive intent buckets, highest precedence first."""

    EXECUTION = "execution"
    BLOCKCHAIN_QUERY = "blockchain_query"
    ANALYSIS = "analysis"
    GENERAL = "general"


# ═══════════════════════════════════════════════════════════════════════════
# MATCHING
# ═══════════════════════════════════════════════════════════════════════════


def _find(text: str, keywords: List[str], whole_word: bool = False) -> List[str]:
    """Keywords occurring in ``text`` at a word start (or as whole words)."""
    tail = r"\b" if whole_word else ""
    return [kw for kw in keywords if re.search(rf"\b{re.escape(kw)}{tail}", text)]


def needs_execution(description: str) -> bool:
    """True if the description contains an execution verb."""
    return bool(_find(description.lower(), EXECUTION_VERBS))


def is_internal_request(description: str) -> bool:
    lower = description.lower()
    return any(indicator in lower for indicator in INTERNAL_INDICATORS)


def internal_category(description: str) -> str:
    """Capability name for an internal request; ``task_management`` by default."""
    lower = description.lower()
    for indicator, category in INTERNAL_CATEGORIES.items():
        if indicator in lower:
            return category
    return "task_management"


def is_blockchain_task(description: str) -> bool:
    return bool(_find(description.lower(), BLOCKCHAIN_KEYWORDS))


def detect_networks(description: str) -> List[str]:
    """Networks named in the description; ``camp`` for unnamed blockchain tasks."""
    lower = description.lower()
    networks = [
        network
        for network, keywords in NETWORK_KEYWORDS.items()
        if _find(lower, keywords, whole_word=True)
    ]
    if not networks and is_blockchain_task(description):
        networks.append(DEFAULT_NETWORK)
    return networks


def extract_required_capabilities(description: str) -> List[str]:
    lower = description.lower()
    return [cap for hint, cap in CAPABILITY_HINTS.items() if _find(lower, [hint])]


def categorize_task(description: str) -> str:
    lower = description.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if _find(lower, keywords):
            return category
    return "general"


def estimate_complexity(description: str, required_capabilities: List[str] | None = None) -> str:
    lower = description.lower()
    if _find(lower, COMPLEXITY_KEYWORDS["complex"]) or len(required_capabilities or []) >= 3:
        return "complex"
    if _find(lower, COMPLEXITY_KEYWORDS["simple"]) and len(lower.split()) <= 12:
        return "simple"
    return "moderate"


def estimate_duration(complexity: str) -> str:
    return DURATION_BY_COMPLEXITY.get(complexity, DURATION_BY_COMPLEXITY["moderate"])


# ═══════════════════════════════════════════════════════════════════════════
# CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class IntentClassification:
    """Result of keyword intent classification."""

    intent: TaskIntent
    confidence: float
    networks: List[str] = field(default_factory=list)
    suggested_agent: str | None = None
    matched_keywords: List[str] = field(default_factory=list)
    reasoning: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be in [0.0, 1.0], got {self.confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": str(self.intent),
            "confidence": round(self.confidence, 3),
            "networks": list(self.networks),
            "suggested_agent": self.suggested_agent,
            "matched_keywords": list(self.matched_keywords),
        }


def classify_intent(description: str) -> IntentClassification:
    """Place a task in exactly one intent bucket."""
    lower = description.lower()
    networks = detect_networks(description)
    reasoning: List[str] = []

    execution = _find(lower, EXECUTION_KEYWORDS)
    query = _find(lower, BLOCKCHAIN_QUERY_KEYWORDS)
    analysis = _find(lower, ANALYSIS_KEYWORDS)

    if execution:
        intent, matched = TaskIntent.EXECUTION, execution
        confidence = min(0.9, 0.6 + 0.1 * len(matched))
        suggested = "goat-agent" if _find(lower, DEFI_KEYWORDS) else "nebula-mcp"
        reasoning.append(f"Execution intent detected: {', '.join(matched)}")
    elif query:
        intent, matched = TaskIntent.BLOCKCHAIN_QUERY, query
        confidence = min(0.9, 0.6 + 0.1 * len(matched))
        suggested = "nebula-mcp"
        reasoning.append(f"Blockchain query detected: {', '.join(matched)}")
    elif analysis:
        intent, matched = TaskIntent.ANALYSIS, analysis
        confidence = min(0.8, 0.4 + 0.1 * len(matched))
        suggested = "chaingpt-mcp" if is_blockchain_task(description) else "research-agent"
        reasoning.append(f"Analysis task detected: {', '.join(matched)}")
    else:
        intent, matched, confidence, suggested = TaskIntent.GENERAL, [], 0.5, None

    if networks:
        reasoning.append(f"Networks detected: {', '.join(networks)}")
        confidence = min(1.0, confidence + 0.1)

    return IntentClassification(
        intent=intent,
        confidence=confidence,
        networks=networks,
        suggested_agent=suggested,
        matched_keywords=matched,
        reasoning=reasoning,
    )


@dataclass
class TaskAnalysis:
    """Coarse analysis attached to every selection result."""

    category: str
    complexity: str
    estimated_duration: str
    required_capabilities: List[str]
    needs_execution: bool
    intent: TaskIntent = TaskIntent.GENERAL
    networks: List[str] = field(default_factory=list)
    internal: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "complexity": self.complexity,
            "estimated_duration": self.estimated_duration,
            "required_capabilities": list(self.required_capabilities),
            "needs_execution": self.needs_execution,
            "intent": str(self.intent),
            "networks": list(self.networks),
            "internal": self.internal,
        }


def analyze_task(description: str, classification: IntentClassification | None = None) -> TaskAnalysis:
    """Build a :class:`TaskAnalysis` for a task description."""
    classification = classification or classify_intent(description)
    required = extract_required_capabilities(description)
    complexity = estimate_complexity(description, required)
    return TaskAnalysis(
        category=categorize_task(description),
        complexity=complexity,
        estimated_duration=estimate_duration(complexity),
        required_capabilities=required,
        needs_execution=needs_execution(description),
        intent=classification.intent,
        networks=list(classification.networks),
        internal=is_internal_request(description),
    )
