"""LangGraph workflow for essay generation with length convergence."""

import time
from typing import Literal, Optional, TYPE_CHECKING, Callable, Dict, Any
from langgraph.graph import StateGraph, END
from essay_writer.errors import UpstreamError
from essay_writer.graph.guards import ExtensionPolicy, is_short, should_extend
from essay_writer.state.state import GenerationRequest, GenerationResult, GenerationState, StopReason
from essay_writer.utils.completion_client import CompletionClient
from essay_writer.agents.writer_agent import writer_agent
from essay_writer.agents.extension_agent import extension_agent

if TYPE_CHECKING:
    from essay_writer.utils.tracking.base_tracker import BaseTracker


def route_after_generate(state: GenerationState, policy: ExtensionPolicy) -> Literal["extend", "finish", "failed"]:
    """Decide what follows the first draft."""
    if state.generation_error is not None:
        return "failed"
    return "extend" if should_extend(state, policy) else "finish"


def route_after_extend(state: GenerationState, policy: ExtensionPolicy) -> Literal["extend", "finish"]:
    """Decide whether another extension attempt is warranted."""
    return "extend" if should_extend(state, policy) else "finish"


def final_stop_reason(state: GenerationState, policy: ExtensionPolicy) -> StopReason:
    """Stop reason for a loop that ended without a guard or failure stop."""
    if state.stop_reason is not None:
        return state.stop_reason
    if is_short(state.word_count, state.request.word_count, policy.tolerance_ratio):
        return StopReason.MAX_ATTEMPTS
    return StopReason.WITHIN_TOLERANCE


def create_workflow(
    client: CompletionClient,
    policy: Optional[ExtensionPolicy] = None,
    tracker: Optional["BaseTracker"] = None
):
    """
    Create LangGraph workflow for essay generation.

    The graph drafts once, then loops through the extend node while the
    draft is short of target and attempts remain. Each routing decision is a
    named guard from essay_writer.graph.guards.

    Args:
        client: Completion client instance
        policy: Extension policy (defaults to ExtensionPolicy())
        tracker: Optional tracker instance for observability

    Returns:
        Compiled LangGraph workflow
    """
    policy = policy or ExtensionPolicy()
    workflow = StateGraph(GenerationState)

    def _wrap_agent(
        agent_name: str,
        agent_func: Callable[[GenerationState, CompletionClient, ExtensionPolicy], Dict[str, Any]]
    ) -> Callable[[GenerationState], Dict[str, Any]]:
        """Wrap an agent function with tracking using context managers."""
        def tracked_node(state: GenerationState) -> Dict[str, Any]:
            if not (tracker and tracker.is_enabled() and hasattr(tracker, 'span_context')):
                return agent_func(state, client, policy)

            start_time = time.time()
            input_metadata = {
                "topic": state.request.topic[:100],
                "target_word_count": state.request.word_count,
                "word_count": state.word_count,
                "extension_attempts": state.extension_attempts,
                "citations_count": len(state.citations)
            }
            with tracker.span_context(name=agent_name, metadata=input_metadata) as span:
                updates = agent_func(state, client, policy)
                if span:
                    output_metadata = {
                        "execution_time_seconds": time.time() - start_time,
                        "success": "generation_error" not in updates and "extension_error" not in updates,
                        "word_count": updates.get("word_count", state.word_count),
                    }
                    if "stop_reason" in updates:
                        output_metadata["stop_reason"] = updates["stop_reason"].value
                    span.update(metadata=output_metadata)
                return updates

        return tracked_node

    def finish_node(state: GenerationState) -> Dict[str, Any]:
        reason = final_stop_reason(state, policy)
        print(
            f"🏁 Final essay word count: {state.word_count}/{state.request.word_count} "
            f"({state.extension_attempts} extension attempts, {reason.value})"
        )
        return {"stop_reason": reason}

    workflow.add_node("generate", _wrap_agent("generate", writer_agent))
    workflow.add_node("extend", _wrap_agent("extend", extension_agent))
    workflow.add_node("finish", finish_node)

    workflow.set_entry_point("generate")

    workflow.add_conditional_edges(
        "generate",
        lambda state: route_after_generate(state, policy),
        {
            "extend": "extend",
            "finish": "finish",
            "failed": END
        }
    )
    workflow.add_conditional_edges(
        "extend",
        lambda state: route_after_extend(state, policy),
        {
            "extend": "extend",
            "finish": "finish"
        }
    )
    workflow.add_edge("finish", END)

    return workflow.compile()


def run_generation(workflow, request: GenerationRequest, policy: Optional[ExtensionPolicy] = None) -> GenerationResult:
    """
    Run a compiled generation workflow for one request.

    Raises:
        UpstreamError: If the initial draft could not be generated
    """
    policy = policy or ExtensionPolicy()
    # generate + finish + one step per extension attempt
    config = {"recursion_limit": policy.max_attempts + 10}
    final_state = GenerationState(**workflow.invoke(GenerationState(request=request), config=config))

    if final_state.generation_error is not None:
        raise UpstreamError("generate essay", final_state.generation_error)

    return GenerationResult(
        content=final_state.content,
        citations=final_state.citations,
        word_count=final_state.word_count,
        extension_attempts=final_state.extension_attempts,
        topic=request.topic,
        thesis=request.thesis,
        arguments=list(request.arguments),
        stop_reason=final_state.stop_reason,
        extension_error=final_state.extension_error
    )
