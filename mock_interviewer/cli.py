"""
Command-line interface for the Mock Interviewer.

This module provides commands to run the API server, manage the knowledge
base, and simulate an interview end to end from the terminal.
"""
import json
import asyncio
import logging
from typing import Dict, List, Optional

import click
from langchain_core.messages import HumanMessage, SystemMessage

from mock_interviewer.ai.interview_packs import get_pack, list_packs
from mock_interviewer.ai.prompts.persona_prompts import SystemPromptContext, generate_system_prompt
from mock_interviewer.core.knowledge_base import KnowledgeBase
from mock_interviewer.core.knowledge_ingest import build_documents, seed_well_architected
from mock_interviewer.core.state_manager import analyze_interview_state, generate_next_question
from mock_interviewer.tools.jd_parser import parse_job_description
from mock_interviewer.tools.scoring import score_interview
from mock_interviewer.utils.config import KNOWLEDGE_BASE_DIR
from mock_interviewer.utils.json_utils import message_text
from mock_interviewer.utils.llm import create_chat_model

logger = logging.getLogger(__name__)

MOCK_CANDIDATE_PROMPT = (
    "You are a Senior DevOps Engineer candidate. Answer the interview question concisely but with some "
    "technical detail. Occasionally mention a tool like kubectl or Terraform."
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Mock Interviewer - AI mock interviews for DevOps and cloud roles"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default SERVER_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (default SERVER_PORT)")
def serve(host: Optional[str], port: Optional[int]):
    """Run the API server."""
    from mock_interviewer.server import run_server

    run_server(host=host, port=port)


@cli.command()
@click.option("--data-dir", default=KNOWLEDGE_BASE_DIR, show_default=True,
              type=click.Path(exists=True, file_okay=False), help="Knowledge base source directory")
def ingest(data_dir: str):
    """Chunk and ingest knowledge base files into Chroma."""
    documents = build_documents(data_dir)
    if not documents:
        click.echo(f"No supported files found in {data_dir}")
        return
    added = KnowledgeBase().add_documents(documents)
    click.echo(f"Ingested {added}/{len(documents)} chunks from {data_dir}")


@cli.command()
def seed():
    """Add the AWS Well-Architected pillar documents."""
    added = KnowledgeBase().add_documents(seed_well_architected())
    click.echo(f"Seeded {added} Well-Architected documents")


@cli.command()
@click.option("--json-output", is_flag=True, help="Print the full report as JSON")
def coverage(json_output: bool):
    """Report which interview focus items the knowledge base covers."""
    report = asyncio.run(KnowledgeBase().check_coverage())
    if json_output:
        click.echo(json.dumps(report, indent=2))
        return

    summary = report["summary"]
    breakdown = summary["breakdown"]
    click.echo(f"Coverage: {summary['covered_topics']}/{summary['total_topics']} "
               f"({summary['coverage_percent']}%)")
    click.echo(f"  id matches: {breakdown['id_matches']}, semantic: {breakdown['semantic_matches']}, "
               f"missing: {breakdown['missing']}")
    for detail in report["details"]:
        if detail["status"] in ("missing", "error"):
            click.echo(f"  [{detail['status']}] {detail['topic']}")


@cli.command()
@click.option("--threshold", default=None, type=float, help="Maximum distance for a match")
def tag(threshold: Optional[float]):
    """Tag knowledge base files with the focus item they best cover."""
    kb = KnowledgeBase()
    counts = asyncio.run(kb.auto_tag() if threshold is None else kb.auto_tag(threshold=threshold))
    click.echo(f"Updated {counts['updated']}, skipped {counts['skipped']}, no match {counts['no_match']}")


async def _mock_candidate_answer(question: str) -> str:
    llm = create_chat_model(temperature=0.9, fast=True)
    response = await llm.ainvoke([SystemMessage(content=MOCK_CANDIDATE_PROMPT), HumanMessage(content=question)])
    return message_text(response).strip() or "I'm not sure."


async def _simulate(pack_id: str, turns: int, interactive: bool, jd_text: Optional[str]) -> Dict:
    pack = get_pack(pack_id)
    parsed_jd = None
    if jd_text and jd_text.strip():
        parsed_jd = await parse_job_description(jd_text)
        click.echo(f"Parsed JD: {parsed_jd.role} ({parsed_jd.level}), tools: {', '.join(parsed_jd.tools) or 'none'}")

    system_prompt = generate_system_prompt(SystemPromptContext(
        target_role=pack.level,
        jd_text=jd_text or pack.description,
        interview_type_title=pack.title,
        parsed_jd=parsed_jd,
        pack_role=pack.role,
    ))

    history: List[Dict[str, str]] = []
    state = None
    for turn in range(1, turns + 1):
        click.echo(f"\n--- TURN {turn} ---")
        state = await analyze_interview_state(history, pack.level, pack.role, jd_text, previous_state=state)
        click.echo(f"State: phase={state.phase}, action={state.next_action.action}, topic={state.current_topic}")

        question = await generate_next_question(state, history, system_prompt)
        click.echo(f"INTERVIEWER: {question}")
        history.append({"role": "assistant", "content": question})

        if interactive:
            answer = click.prompt("YOU", type=str)
        else:
            answer = await _mock_candidate_answer(question)
            click.echo(f"CANDIDATE: {answer}")
        history.append({"role": "user", "content": answer})

    click.echo("\nScoring interview...")
    score = await score_interview(history, pack_info={"role": pack.role, "level": pack.level, "title": pack.title})
    return score.to_json_dict()


@cli.command()
@click.option("--pack-id", default="devops-senior", show_default=True, help="Interview pack to simulate")
@click.option("--turns", default=2, show_default=True, type=click.IntRange(1, 20), help="Question/answer turns")
@click.option("--interactive", is_flag=True, help="Answer the questions yourself")
@click.option("--jd-file", type=click.File("r"), help="Job description to tailor the interview to")
def simulate(pack_id: str, turns: int, interactive: bool, jd_file):
    """Run a full interview against the model and print the score."""
    if not get_pack(pack_id):
        available = ", ".join(p.id for p in list_packs())
        raise click.BadParameter(f"Unknown pack '{pack_id}'. Available: {available}", param_hint="--pack-id")

    jd_text = jd_file.read() if jd_file else None
    result = asyncio.run(_simulate(pack_id, turns, interactive, jd_text))
    click.echo(json.dumps(result, indent=2))


if __name__ == "__main__":
    cli()
