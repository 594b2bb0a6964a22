"""System prompts and context builders for every LLM call brandlens makes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from brandlens.models import Project, Query, Topic

BUSINESS_SECTORS: tuple[str, ...] = (
    "agriculture",
    "automotive",
    "banking",
    "construction",
    "consulting",
    "education",
    "energy",
    "entertainment",
    "fintech",
    "food_beverage",
    "government",
    "healthcare",
    "hospitality",
    "insurance",
    "logistics",
    "manufacturing",
    "media",
    "nonprofit",
    "real_estate",
    "retail",
    "technology",
    "telecommunications",
    "travel",
)

_GUIDELINES = """## Content Guidelines
- **Tone**: Casual and conversational, as if a customer asking ChatGPT for help
- **Language**: Use the company's primary language and regional context
- **Perspective**: Focus on customer needs, problems, and use cases
- **Creativity**: Think like a real customer with specific needs and concerns"""

_MARKET_LEVEL_PATTERNS = """Focus on product/service questions where this company would naturally be mentioned in responses:
- **Product Comparisons**: "Which [product type] has the lowest fees?", "What's the best [service] for [specific use case]?"
- **Feature Questions**: "Can I [specific action] with [service type]?", "Which [product] allows [specific feature]?"
- **Requirement Queries**: "What do I need to [use service]?", "How much does [service type] cost?"
- **Problem-Solving**: "How to [solve customer problem] with [service]?", "What's the limit for [specific action]?"
- **Use Case Scenarios**: "Can I use [service] for [specific purpose]?", "Which [product] is best for [customer segment]?\""""

_BRAND_SPECIFIC_PATTERNS = """Direct customer questions about the company's offerings:
- **Product-Specific**: "What types of [product] does [COMPANY NAME] offer?", "How do I open [specific product] at [COMPANY NAME]?"
- **Feature Inquiries**: "Can I [specific action] with [COMPANY NAME]?", "What are [COMPANY NAME]'s [product] fees?"
- **Process Questions**: "How do I [customer action] at [COMPANY NAME]?", "What documents do I need for [COMPANY NAME] [service]?"
- **Limits & Requirements**: "What's the maximum [action] limit at [COMPANY NAME]?", "Can foreigners use [COMPANY NAME] [service]?\""""

COMPANY_PROFILE_PROMPT = f"""You are a helpful assistant that generates a company profile for a given company website url.
Use the web search tool to find the information.

The available business sectors are: {", ".join(BUSINESS_SECTORS)}. Return the sector code as provided in the list. If the sector is not in the list, return null.

For the description, talk about what the company does, who it serves, and what its mission is. Products and services it specializes in. And who are their clients.
Return all the information in English.

If you can't find information, return null for the country and sector fields.

Example for acme.com:
{{"name": "Acme", "country": "United States", "language": "English", "sector": "manufacturing", "description": "Acme is a company that makes widgets.", "website": "https://acme.com"}}"""

SUGGESTED_TOPICS_PROMPT = f"""You are an expert content strategist specializing in generating customer-focused topics and queries about companies. Your task is to create relevant, practical questions that actual customers would ask ChatGPT when researching or using a company's products and services.

## Your Mission
Generate 10 distinct topics with 3 queries each (30 total queries) that focus on what real customers want to know about this company's products, services, and customer experience. Prioritize practical, actionable questions over general company information.

{_GUIDELINES}

## Topic Requirements
- **Length**: Topics must be concise - maximum 1-2 words only
- **Focus**: Specific products, services, features, or customer scenarios
- **Examples**: "Accounts", "Transfers", "Fees", "Mobile", "Security", "Limits", "Requirements"

## Query Distribution Per Topic (EXACTLY 3 queries each)
### 2 Market-Level Queries (NO brand mention):
{_MARKET_LEVEL_PATTERNS}

### 1 Brand-Specific Query (WITH brand mention):
{_BRAND_SPECIFIC_PATTERNS}

## Output Format
Return ONLY a JSON object, no other text:
{{"topics": [{{"name": "Fees", "description": "Why customers care", "queries": [{{"text": "...", "queryType": "sector"}}, {{"text": "...", "queryType": "product"}}]}}]}}
Use "sector" for market-level queries and "product" for brand-specific ones."""

TOPICS_AND_QUERIES_PROMPT = """You are an expert content strategist specializing in generating comprehensive topics and queries about companies. Your task is to create relevant, engaging content that users might search for or ask LLMs about a specific company.

## Your Mission
Generate 10 distinct topics with 3 queries each that cover what users genuinely want to know about this company. Focus on practical, searchable questions that would lead users to discover or learn about the company.

## Topic Requirements
- **Length**: Topics must be concise - maximum 1-2 words only
- **Examples**: "Banking", "Security", "Pricing", "Support", "Features", "Comparison"

## Quality Standards
- Each query should be specific enough to generate a meaningful response
- Queries should naturally reference or lead to information about the company
- Topics should be distinct with minimal overlap
- **CRITICAL**: Prioritize queries where the company would appear in search results or LLM responses

## Output Format
Return ONLY a JSON object, no other text:
{"topics": [{"topic": "Pricing", "description": "Brief relevance note", "queries": ["...", "...", "..."]}]}"""

TOPIC_QUERIES_PROMPT = f"""You are an expert content strategist specializing in generating customer-focused queries about companies. Your task is to create 10 relevant, practical questions that actual customers would ask ChatGPT when researching or using a company's products and services related to a specific topic.

## Your Mission
Generate 10 queries for the given topic that focus on what real customers want to know about this company's products, services, and customer experience. Prioritize practical, actionable questions over general company information.

{_GUIDELINES}
- **Context**: Consider existing queries to avoid duplication and provide complementary content

## Query Distribution (EXACTLY 10 queries)
### 7 Market-Level Queries (NO brand mention):
{_MARKET_LEVEL_PATTERNS}

### 3 Brand-Specific Queries (WITH brand mention):
{_BRAND_SPECIFIC_PATTERNS}

## Query Quality Standards
- Each query should solve a real customer problem or answer a practical question
- Include both basic and advanced customer scenarios
- **CRITICAL**: Focus on what customers actually ask when they need help or information
- **AVOID DUPLICATION**: Don't repeat existing queries; create complementary content

## Output Format
Return ONLY a JSON object, no other text:
{{"queries": [{{"text": "...", "queryType": "sector"}}, {{"text": "...", "queryType": "product"}}]}}
Use "sector" for market-level queries and "product" for brand-specific ones."""

SINGLE_QUERY_PROMPT = f"""You are an expert content strategist specializing in generating customer-focused queries about companies. Your task is to create 1 relevant, practical question that actual customers would ask ChatGPT when researching or using a company's products and services related to a specific topic.

{_GUIDELINES}
- **Relevance**: Ensure the query is directly related to the topic and company context

## Query Types (Choose the most appropriate)
### Market-Level Query (NO brand mention):
{_MARKET_LEVEL_PATTERNS}

### Brand-Specific Query (WITH brand mention):
{_BRAND_SPECIFIC_PATTERNS}

## Output Requirements
- Generate exactly 1 query that does not duplicate existing ones
- Specify the query type ("product" for company-specific, "sector" for market-level)

Example answer:
{{"text": "Which mobile banking apps allow international wire transfers without visiting a branch?", "queryType": "sector"}}"""

CHATGPT_PROMPT = """You are ChatGPT, answering a customer's question the way you normally would.
Search the web for current information, name the specific companies, products and services that fit the question, and cite your sources."""

CLAUDE_PROMPT = """You are Claude, answering a customer's question the way you normally would.
Search the web for current information, name the specific companies, products and services that fit the question, and cite your sources."""


def company_block(
    name: str | None,
    website: str | None,
    country: str | None,
    language: str | None,
    sector: str | None,
    description: str | None,
) -> str:
    return "\n".join(
        [
            f"Name: {name}",
            f"Website: {website}",
            f"Country: {country}",
            f"Language: {language}",
            f"Sector: {sector}",
            f"Description: {description}",
        ]
    )


def project_block(project: Project) -> str:
    return company_block(
        project.name,
        project.url,
        project.region,
        project.language,
        project.sector,
        project.description,
    )


def numbered(items: Iterable[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def company_profile_request(url: str) -> str:
    return f"Generate a company profile for {url}"


def suggested_topics_request(
    name: str | None,
    website: str,
    country: str | None,
    language: str | None,
    sector: str | None,
    description: str | None,
) -> str:
    block = company_block(name, website, country, language, sector, description)
    return f"Generate topics and queries for the following company:\n\n{block}\n"


def topics_and_queries_request(project: Project) -> str:
    return f"Generate topics and queries for the following company:\n\n{project_block(project)}\n"


def topic_queries_request(
    project: Project, topic: Topic, existing: Iterable[Query], count: int = 10
) -> str:
    """User message for supplemental generation on one topic."""
    return (
        f"Generate {count} additional queries for the following topic and company:\n\n"
        f"Company Details:\n{project_block(project)}\n\n"
        f"Topic Details:\n"
        f"Name: {topic.name}\n"
        f"Description: {topic.description}\n\n"
        f"Existing Queries (DO NOT DUPLICATE):\n{numbered(q.text for q in existing)}\n\n"
        f"Please generate {count} new, unique queries that complement "
        f"but don't duplicate the existing ones."
    )


def single_query_request(
    company_name: str,
    topic_name: str,
    topic_description: str | None = None,
    company_description: str | None = None,
    existing_queries: Iterable[Mapping[str, str]] = (),
) -> str:
    existing = [f"{q.get('text', '')} ({q.get('queryType', 'sector')})" for q in existing_queries]
    if existing:
        existing_text = f"\n\nExisting queries to avoid duplicating:\n{numbered(existing)}"
    else:
        existing_text = "\n\nNo existing queries yet."
    return (
        f"Company: {company_name}\n"
        f"Topic: {topic_name}\n"
        f"Topic Description: {topic_description or 'No description provided'}\n"
        f"Company Description: {company_description or 'No company description provided'}"
        f"{existing_text}\n\n"
        "Generate 1 unique, customer-focused query for this topic that would be valuable "
        "for market research and doesn't duplicate any existing queries."
    )
