"""
Offline code generator used when no model backend is wired in.

Produces a minimal contract skeleton from the request's description and
category without calling any external service.
"""

import asyncio
import re

from template_forge.oracle.listener import GenerationRequestEvent

CONTRACT_SKELETON = """#![no_std]

multiversx_sc::imports!();

/// {category} smart contract
///
/// Description: {description}
#[multiversx_sc::contract]
pub trait {name}Contract {{
    #[init]
    fn init(&self) {{}}

    #[view(getStatus)]
    fn get_status(&self) -> bool {{
        true
    }}
}}
"""


def contract_name(category: str) -> str:
    """CamelCase trait name derived from a category, "Template" if empty."""
    words = re.findall(r"[A-Za-z0-9]+", category)
    return "".join(word[:1].upper() + word[1:] for word in words) or "Template"


async def generate_placeholder_contract(request: GenerationRequestEvent, delay: float = 0.0) -> str:
    if delay:
        await asyncio.sleep(delay)
    return CONTRACT_SKELETON.format(
        category=request.category or "General",
        description=" ".join(request.description.split()),
        name=contract_name(request.category),
    )
