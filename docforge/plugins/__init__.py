"""
Built-in document-type plugins.

Each module defines one ``PLUGIN``; ``register_builtin_plugins`` loads all of
them into a registry in a stable order.
"""

from __future__ import annotations

from docforge.plugins import (
    acceptance_criteria,
    adr,
    business_justification,
    generic,
    jd,
    one_pager,
    power_statement,
    pr_faq,
    prd,
    strategic_proposal,
)

BUILTIN_PLUGINS = (
    one_pager.PLUGIN,
    prd.PLUGIN,
    pr_faq.PLUGIN,
    adr.PLUGIN,
    jd.PLUGIN,
    acceptance_criteria.PLUGIN,
    business_justification.PLUGIN,
    power_statement.PLUGIN,
    strategic_proposal.PLUGIN,
    generic.PLUGIN,
)


def register_builtin_plugins(registry) -> None:
    for plugin in BUILTIN_PLUGINS:
        registry.register(plugin)
