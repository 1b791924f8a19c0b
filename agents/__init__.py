"""
Agents package for the Research Planner Agent project.

`ResearchOrchestrator` runs the plan -> confirm -> answer -> report
workflow against any `ResearchServices` implementation:

```python
from agents import ResearchOrchestrator
from agents.autogen_services import AutoGenResearchServices

outcome = await ResearchOrchestrator(AutoGenResearchServices()).run("topic", "plan")
```
"""

from .config import ResearchConfig  # noqa: F401
from .research_orchestrator import ResearchOrchestrator, research_topic_and_report  # noqa: F401
from .services import INTENT_OPTIONS, ResearchServices  # noqa: F401

__all__ = [
    "INTENT_OPTIONS",
    "ResearchConfig",
    "ResearchOrchestrator",
    "ResearchServices",
    "research_topic_and_report",
]
