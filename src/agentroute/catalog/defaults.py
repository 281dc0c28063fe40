"""
Built-in catalog: capabilities, synonym variants, related-term clusters,
agent profiles and the near-tie precedence table.

Used when no catalog file is configured. A JSON catalog (see
:mod:`agentroute.catalog.config`) replaces these tables wholesale.
"""

from __future__ import annotations

from typing import Any, Dict, List

# ═══════════════════════════════════════════════════════════════════════════
# CAPABILITIES
# ═══════════════════════════════════════════════════════════════════════════

DEFAULT_CAPABILITIES: List[Dict[str, Any]] = [
    {
        "id": "erc20_deployment",
        "high_level": "token-deployment",
        "specific_tasks": ["deploy_erc20", "create_token", "token_contract_deployment"],
        "tools": ["deploy_erc20_contract", "create_token_contract", "set_token_metadata"],
        "agents": ["goat-agent"],
        "priority": 10,
        "description": "ERC20 token contract deployment and configuration",
    },
    {
        "id": "contract_deployment",
        "high_level": "smart-contract-deployment",
        "specific_tasks": ["deploy_contract", "contract_verification", "contract_interaction"],
        "tools": ["deploy_contract", "verify_contract", "interact_contract"],
        "agents": ["goat-agent", "code-generation-agent"],
        "priority": 9,
        "description": "Smart contract deployment and management",
    },
    {
        "id": "blockchain_operations",
        "high_level": "blockchain-operations",
        "specific_tasks": ["balance_check", "token_transfer", "blockchain_query", "transaction_status"],
        "tools": ["check_balance", "transfer_tokens", "query_blockchain", "get_transaction"],
        "agents": ["nebula-mcp", "goat-agent"],
        "priority": 8,
        "description": "Core blockchain interaction capabilities",
    },
    {
        "id": "nft_management",
        "high_level": "nft-management",
        "specific_tasks": ["nft_mint", "nft_deploy", "nft_metadata", "nft_transfer"],
        "tools": ["mint_nft", "deploy_nft_contract", "upload_metadata", "transfer_nft"],
        "agents": ["nebula-mcp", "goat-agent"],
        "priority": 7,
        "description": "NFT creation and management operations",
    },
    {
        "id": "defi_protocols",
        "high_level": "defi-protocols",
        "specific_tasks": ["token_swap", "liquidity_provision", "yield_farming", "lending"],
        "tools": ["execute_swap", "add_liquidity", "stake_tokens", "lend_assets"],
        "agents": ["goat-agent", "nebula-mcp"],
        "priority": 9,
        "description": "Decentralized finance protocol interactions",
    },
    {
        "id": "blockchain_reasoning",
        "high_level": "blockchain-reasoning",
        "specific_tasks": ["natural_language_query", "contract_analysis", "security_audit", "optimization"],
        "tools": ["query_ai", "analyze_security", "suggest_optimizations", "explain_contract"],
        "agents": ["chaingpt-mcp", "nebula-mcp"],
        "priority": 6,
        "description": "AI-powered blockchain analysis and reasoning",
    },
    {
        "id": "session_signers",
        "high_level": "session-signers",
        "specific_tasks": ["create_session", "manage_permissions", "sign_transaction", "revoke_session"],
        "tools": ["create_signer", "set_permissions", "sign_tx", "revoke_access"],
        "agents": ["goat-agent"],
        "priority": 9,
        "description": "Session signer creation and management",
    },
    {
        "id": "research",
        "high_level": "research-analysis",
        "specific_tasks": ["market_research", "competitor_analysis", "trend_analysis", "report_generation"],
        "tools": ["web_search", "analyze_data", "generate_report"],
        "agents": ["research-agent", "chaingpt-mcp"],
        "priority": 7,
        "description": "Research, market analysis and report generation",
    },
    {
        "id": "code_generation",
        "high_level": "code-generation",
        "specific_tasks": [
            "smart_contract_development",
            "frontend_development",
            "api_development",
            "testing_automation",
        ],
        "tools": ["generate_code", "refactor_code", "write_tests"],
        "agents": ["code-generation-agent"],
        "priority": 8,
        "description": "Code generation for contracts, frontends, APIs and tests",
    },
    {
        "id": "documentation",
        "high_level": "document-writing",
        "specific_tasks": ["technical_documentation", "api_documentation", "whitepaper", "user_manual"],
        "tools": ["write_document", "render_markdown"],
        "agents": ["docwriter-mcp"],
        "priority": 6,
        "description": "Technical writing and document generation",
    },
    {
        "id": "scheduling",
        "high_level": "task-scheduling",
        "specific_tasks": ["schedule_task", "recurring_operation", "price_alert", "automation"],
        "tools": ["create_schedule", "cancel_schedule", "list_schedules"],
        "agents": ["scheduler-mcp"],
        "priority": 6,
        "description": "Scheduling and automation of recurring operations",
    },
    {
        "id": "companion_interactions",
        "high_level": "companion-interactions",
        "specific_tasks": ["companion_chat", "personality_response", "relationship_aware", "context_tracking"],
        "tools": ["process_message", "generate_response", "update_context", "track_relationship"],
        "agents": ["companion-handler"],
        "priority": 10,
        "description": "AI companion interaction and personality management",
    },
    {
        "id": "task_management",
        "high_level": "task-management",
        "specific_tasks": ["task_analysis", "agent_delegation", "workflow_execution", "result_synthesis"],
        "tools": ["analyze_task", "delegate_to_agent", "execute_workflow", "synthesize_results"],
        "agents": ["task-orchestrator", "task-analyzer"],
        "priority": 9,
        "description": "Multi-agent task coordination and execution",
    },
]

# canonical alias -> surface variants
DEFAULT_SYNONYMS: Dict[str, List[str]] = {
    "balance_check": ["check_balance", "get_balance", "wallet_balance", "account_balance"],
    "token_transfer": ["send_tokens", "transfer_tokens", "move_funds", "send_payment"],
    "nft_mint": ["mint_nft", "create_nft", "generate_nft", "deploy_nft"],
    "deploy_erc20": ["deploy_token", "launch_token", "token_deployment"],
    "deploy_contract": ["smart_contract", "contract_creation"],
    "blockchain_query": ["query_blockchain", "search_blockchain", "blockchain_data", "chain_info"],
    "market_research": ["market_analysis", "industry_research", "market_study", "research_market"],
    "competitor_analysis": ["competitive_analysis", "competitor_research", "competition_study"],
    "trend_analysis": ["trend_research", "market_trends", "industry_trends", "forecast"],
    "smart_contract_development": ["write_contract", "create_contract", "solidity_code", "contract_code"],
    "frontend_development": ["react_component", "ui_component", "frontend_code", "web_component"],
    "api_development": ["api_endpoint", "backend_code", "server_code", "rest_api"],
    "testing_automation": ["write_tests", "test_suite", "unit_tests", "testing_code"],
    "companion_chat": ["chat_companion", "talk_to_companion", "companion_interaction", "ai_conversation"],
}

# Terms in the same cluster make two capability names "related".
RELATED_CLUSTERS: List[List[str]] = [
    ["blockchain", "crypto", "token", "wallet", "transaction"],
    ["nft", "erc721", "collectible", "metadata"],
    ["defi", "swap", "liquidity", "yield", "stake"],
    ["contract", "deploy", "smart", "solidity"],
    ["companion", "chat", "conversation", "personality"],
    ["task", "orchestration", "delegation", "workflow"],
]

# (preferred, other): preferred wins when confidences differ by <= margin
DEFAULT_TIE_BREAK: List[List[str]] = [["chaingpt-mcp", "nebula-mcp"]]

# ═══════════════════════════════════════════════════════════════════════════
# AGENTS
# ═══════════════════════════════════════════════════════════════════════════

DEFAULT_AGENTS: List[Dict[str, Any]] = [
    {
        "agent_id": "goat-agent",
        "name": "GoatAgent",
        "agent_type": "mcp",
        "execution_capable": True,
        "security_level": "high",
        "description": (
            "Plugin executor for named DeFi protocols: Uniswap, 1inch, Jupiter, "
            "Curve, Polymarket, Compound and Aave operations, token deployment "
            "and session signers."
        ),
        "capabilities": [
            "defi_protocols", "token_swap", "liquidity_provision", "erc20_deployment",
            "contract_deployment", "session_signers", "token_transfer", "blockchain_operations",
        ],
        "specializations": ["defi", "swap", "erc20"],
        "keywords": [
            "uniswap", "1inch", "jupiter", "curve", "polymarket", "compound", "aave",
            "defi", "protocol", "swap", "liquidity", "yield", "lending", "borrowing",
        ],
        "use_cases": [
            "Execute Uniswap token swaps when Uniswap is specifically mentioned",
            "Provide liquidity to Curve pools",
            "Execute Compound or Aave lending and borrowing",
            "Deploy ERC20 token contracts",
            "Create session signers for automated DeFi operations",
        ],
    },
    {
        "agent_id": "nebula-mcp",
        "name": "NebulaMCP",
        "agent_type": "mcp",
        "execution_capable": True,
        "security_level": "high",
        "description": (
            "Cross-chain agent with real-time blockchain insights across EVM chains, "
            "natural language transaction execution and Web3 reasoning."
        ),
        "capabilities": [
            "blockchain_operations", "balance_check", "nft_mint", "nft_management",
            "cross_chain_transactions", "blockchain_reasoning", "token_transfer",
        ],
        "specializations": ["nft", "balance", "cross_chain"],
        "keywords": [
            "nebula", "cross-chain", "real-time", "transactions", "evm", "chains",
            "web3", "nft", "tokens", "contracts", "balance",
        ],
        "use_cases": [
            "Check wallet balances across chains",
            "Execute cross-chain transactions with natural language commands",
            "Mint and monitor NFT collections",
            "Bridge tokens between blockchain networks",
            "Simulate transactions before execution",
        ],
    },
    {
        "agent_id": "chaingpt-mcp",
        "name": "ChainGPTMCP",
        "agent_type": "mcp",
        "execution_capable": True,
        "security_level": "medium",
        "description": (
            "Web3 language model with on-chain and off-chain data: market research, "
            "wallet intelligence, token analysis, sentiment, NFT insights and "
            "smart contract audits."
        ),
        "capabilities": [
            "blockchain_reasoning", "security_audit", "market_research", "wallet_analysis",
            "token_analysis", "sentiment_analysis", "blockchain_query",
        ],
        "specializations": ["audit", "market", "tokenomics"],
        "keywords": [
            "chaingpt", "web3", "audit", "security", "vulnerability", "market research",
            "wallet analysis", "tokenomics", "crypto", "blockchain", "sentiment", "price analysis",
        ],
        "use_cases": [
            "Generate real-time crypto market overview reports",
            "Explain project tokenomics and unlock schedules",
            "Audit smart contract code for security vulnerabilities",
            "Track whale activity and on-chain trends",
            "Retrieve NFT floor prices and collection statistics",
        ],
    },
    {
        "agent_id": "research-agent",
        "name": "ResearchAgent",
        "agent_type": "specialized",
        "execution_capable": False,
        "security_level": "low",
        "description": "Research and analysis agent with web search, data analysis and report generation.",
        "capabilities": ["research", "market_research", "competitor_analysis", "trend_analysis", "data_analysis"],
        "specializations": ["research", "analysis"],
        "keywords": ["research", "analysis", "data", "investigate", "study", "report"],
        "use_cases": [
            "Research market trends and competitor analysis",
            "Analyze blockchain data and transaction patterns",
            "Generate comprehensive research reports",
            "Compare protocols and technologies",
        ],
    },
    {
        "agent_id": "code-generation-agent",
        "name": "CodeGenerationAgent",
        "agent_type": "specialized",
        "execution_capable": False,
        "security_level": "medium",
        "description": "Code generation agent supporting many languages and frameworks.",
        "capabilities": [
            "code_generation", "smart_contract_development", "frontend_development",
            "api_development", "testing_automation", "contract_deployment",
        ],
        "specializations": ["contract", "frontend", "api"],
        "keywords": ["code", "generate", "develop", "programming", "smart contract", "javascript", "solidity"],
        "use_cases": [
            "Generate smart contracts and DApps",
            "Create frontend applications and components",
            "Build backend APIs and services",
            "Write automated tests and deployment scripts",
        ],
    },
    {
        "agent_id": "docwriter-mcp",
        "name": "DocumentWriterMCP",
        "agent_type": "mcp",
        "execution_capable": False,
        "security_level": "low",
        "description": "Document creation and technical writing: markdown, API docs and reports.",
        "capabilities": ["documentation", "technical_documentation", "report_generation"],
        "specializations": ["documentation"],
        "keywords": ["document", "writing", "markdown", "report", "documentation", "technical"],
        "use_cases": [
            "Generate technical documentation",
            "Create API documentation and guides",
            "Produce whitepaper content",
            "Generate user manuals and tutorials",
        ],
    },
    {
        "agent_id": "scheduler-mcp",
        "name": "SchedulerMCP",
        "agent_type": "mcp",
        "execution_capable": True,
        "security_level": "medium",
        "description": "Scheduling and automation agent for recurring and time-based operations.",
        "capabilities": ["scheduling", "automation", "workflow_automation", "price_alert"],
        "specializations": ["schedule"],
        "keywords": ["schedule", "automation", "cron", "recurring", "timer", "workflow"],
        "use_cases": [
            "Schedule recurring blockchain operations",
            "Automate portfolio rebalancing",
            "Set up price alert monitoring",
        ],
    },
    # Non-task agents are routed on the rule-based path only.
    {
        "agent_id": "task-orchestrator",
        "name": "TaskOrchestrator",
        "agent_type": "core",
        "task_agent": False,
        "description": "Central orchestration agent managing task distribution between agents.",
        "capabilities": ["task_management", "task_orchestration", "agent_delegation", "workflow_execution"],
        "specializations": ["orchestrat", "delegat"],
    },
    {
        "agent_id": "task-analyzer",
        "name": "TaskAnalyzer",
        "agent_type": "core",
        "task_agent": False,
        "description": "Task analysis and feasibility assessment for incoming requests.",
        "capabilities": ["task_management", "task_analysis", "feasibility_assessment"],
        "specializations": ["analy"],
    },
    {
        "agent_id": "task-tracker",
        "name": "TaskTracker",
        "agent_type": "support",
        "task_agent": False,
        "description": "Task monitoring and progress tracking for all agent operations.",
        "capabilities": ["task_tracking", "progress_monitoring"],
        "specializations": ["track"],
    },
    {
        "agent_id": "companion-handler",
        "name": "CompanionHandler",
        "agent_type": "core",
        "task_agent": False,
        "description": "Companion interaction handler managing personalized conversations.",
        "capabilities": ["companion_interactions", "companion_chat", "personality_response"],
        "specializations": ["companion", "chat"],
    },
    {
        "agent_id": "profile-memory",
        "name": "ProfileMemory",
        "agent_type": "support",
        "task_agent": False,
        "description": "User profile and conversation memory management.",
        "capabilities": ["memory_management", "profile_storage", "conversation_history"],
        "specializations": ["memory"],
    },
    {
        "agent_id": "prompt-engineer",
        "name": "PromptEngineer",
        "agent_type": "support",
        "task_agent": False,
        "description": "Prompt optimization and engineering for improved agent performance.",
        "capabilities": ["prompt_engineering", "prompt_optimization"],
        "specializations": ["prompt"],
    },
]
