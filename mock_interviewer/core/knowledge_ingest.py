"""
Knowledge base ingestion.

Loads interviewer reference notes from ``KNOWLEDGE_BASE_DIR``, pulls metadata
out of their YAML front matter, and splits them into chunks ready for the
vector store. The first directory under the root is the document category,
e.g. ``kubernetes/pod_lifecycle.md`` has category ``kubernetes``.
"""
import os
import re
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from mock_interviewer.utils.config import KNOWLEDGE_BASE_DIR
from mock_interviewer.utils.constants import CHUNK_OVERLAP, CHUNK_SIZE, RAG_SOURCE_LABEL, SUPPORTED_EXTENSIONS
from mock_interviewer.utils.profiling import timed_function

logger = logging.getLogger(__name__)

_FRONT_MATTER = re.compile(r"^---\n(.*?)\n---", re.DOTALL)
_HEADING = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_REFERENCE_SUFFIX = re.compile(r"\s*_?\s*Interviewer Reference\s*$", re.IGNORECASE)

SOURCE_URLS = {
    "aws": "https://aws.amazon.com/",
    "cloud": "https://aws.amazon.com/",
    "kubernetes": "https://kubernetes.io/docs/",
    "linux": "https://www.kernel.org/",
    "docker": "https://docs.docker.com/",
    "terraform": "https://www.terraform.io/docs/",
    "iac": "https://www.terraform.io/docs/",
    "ci-cd": "https://www.jenkins.io/doc/",
    "sre": "https://sre.google/",
}

WELL_ARCHITECTED_URL = "https://aws.amazon.com/architecture/well-architected/"

WELL_ARCHITECTED_PILLARS = {
    "Operational Excellence": """AWS Operational Excellence Pillar:
1. Perform operations as code: In the cloud, you can define your entire workload (applications, infrastructure) as code and update it with code.
2. Make frequent, small, reversible changes: Design workloads to allow components to be updated frequently.
3. Refine operations procedures frequently: As you use operations procedures, look for opportunities to improve them.
4. Anticipate failure: Perform "pre-mortem" exercises to identify potential failure sources so that they can be removed or mitigated.
5. Learn from all operational failures: Drive improvement through post-incident analysis.""",
    "Security": """AWS Security Pillar:
1. Implement a strong identity foundation: Implement the principle of least privilege and enforce separation of duties with appropriate authorization for each interaction with your AWS resources.
2. Enable traceability: Monitor, alert, and audit actions and changes to your environment in real time.
3. Apply security at all layers: Apply a defense in depth approach with multiple security controls at every layer (edge of network, VPC, load balancing, every instance and compute service, operating system, application, and code).
4. Automate security best practices: Automated software-based security mechanisms improve your ability to securely scale more rapidly and cost-effectively.
5. Protect data in transit and at rest: Classify your data into sensitivity levels and use mechanisms, such as encryption, tokenization, and access control where appropriate.""",
    "Reliability": """AWS Reliability Pillar:
1. Automatically recover from failure: By monitoring a workload for key performance indicators (KPIs), you can trigger automation when a threshold is breached.
2. Test recovery procedures: In the cloud, you can test how your workload fails, and duplicate the original scenario to validate your recovery procedures.
3. Scale horizontally to increase aggregate workload availability: Replace one large resource with multiple small resources to reduce the impact of a single failure.
4. Stop guessing capacity: In the cloud, you can use automation to add or remove capacity resources on demand.
5. Manage change in automation: Changes to your infrastructure should be made using automation.""",
}


@dataclass
class SourceFile:
    path: str
    content: str
    category: str


def slugify(text: str) -> str:
    """Lowercase and collapse non-alphanumeric runs into single dashes."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def is_supported_file(filename: str) -> bool:
    return os.path.splitext(filename)[1].lower() in SUPPORTED_EXTENSIONS


def load_files(data_dir: str = KNOWLEDGE_BASE_DIR) -> List[SourceFile]:
    """
    Recursively load every supported file under ``data_dir``.

    Unreadable files are logged and skipped.
    """
    files: List[SourceFile] = []
    if not os.path.isdir(data_dir):
        logger.warning(f"Knowledge base directory not found: {data_dir}")
        return files

    for root, dirs, names in os.walk(data_dir):
        dirs.sort()
        for name in sorted(names):
            if not is_supported_file(name):
                continue
            full_path = os.path.join(root, name)
            relative = os.path.relpath(full_path, data_dir)
            parts = relative.split(os.sep)
            category = parts[0] if len(parts) > 1 else "general"
            try:
                with open(full_path, "r", encoding="utf-8") as f:
                    files.append(SourceFile(path=full_path, content=f.read(), category=category))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to read {full_path}: {e}")
    logger.info(f"Loaded {len(files)} knowledge base files from {data_dir}")
    return files


def parse_front_matter(content: str) -> Dict[str, Any]:
    """
    Parse a leading ``---`` YAML block.

    List values are joined with commas so they stay filterable scalar
    metadata in Chroma.
    """
    match = _FRONT_MATTER.match(content)
    if not match:
        return {}
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Invalid front matter: {e}")
        return {}
    if not isinstance(data, dict):
        return {}

    metadata = {}
    for key, value in data.items():
        if isinstance(value, (list, tuple)):
            metadata[str(key)] = ",".join(str(v) for v in value)
        elif value is not None:
            metadata[str(key)] = value if isinstance(value, (str, int, float, bool)) else str(value)
    return metadata


def extract_metadata(file_path: str, category: str, content: str) -> Dict[str, Any]:
    """Build chunk metadata for one source file."""
    filename = os.path.basename(file_path)
    path_parts = file_path.replace(os.sep, "/").split("/")
    metadata: Dict[str, Any] = {
        "source": filename,
        "category": category,
        "type": "interviewer_reference",
        "file_path": file_path,
    }
    if len(path_parts) > 2:
        metadata["subcategory"] = path_parts[-2]
    metadata.update(parse_front_matter(content))

    if not metadata.get("title"):
        heading = _HEADING.search(content)
        metadata["title"] = heading.group(1).strip() if heading else os.path.splitext(filename)[0]
    metadata["title"] = _REFERENCE_SUFFIX.sub("", str(metadata["title"])).strip()

    url = SOURCE_URLS.get(category.lower())
    if url:
        metadata["url"] = url
    return metadata


def split_text(content: str, metadata: Dict[str, Any]) -> List[Document]:
    """Split a document into overlapping chunks tagged with their position."""
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=CHUNK_SIZE,
        chunk_overlap=CHUNK_OVERLAP,
        separators=["\n\n", "\n", ". ", " ", ""],
    )
    chunks = splitter.split_text(content)
    return [
        Document(
            page_content=chunk,
            metadata={**metadata, "chunk_index": index, "total_chunks": len(chunks), "chunk_size": len(chunk)},
        )
        for index, chunk in enumerate(chunks)
    ]


@timed_function()
def build_documents(data_dir: str = KNOWLEDGE_BASE_DIR) -> List[Document]:
    """Load, tag and chunk every knowledge base file."""
    documents: List[Document] = []
    for source in load_files(data_dir):
        metadata = extract_metadata(source.path, source.category, source.content)
        chunks = split_text(source.content, metadata)
        logger.debug(f"{metadata['source']}: {len(chunks)} chunks")
        documents.extend(chunks)
    return documents


def seed_well_architected() -> List[Document]:
    """Documents for the three core AWS Well-Architected pillars."""
    return [
        Document(
            page_content=content,
            metadata={
                "category": "Design Principles",
                "type": "pillar",
                "title": name,
                "source": RAG_SOURCE_LABEL,
                "url": WELL_ARCHITECTED_URL,
            },
        )
        for name, content in WELL_ARCHITECTED_PILLARS.items()
    ]


def tag_file_with_id(file_path: str, slug: str) -> Optional[str]:
    """
    Add ``id: <slug>`` to a file's front matter.

    Files that already carry an id are left alone.

    Returns:
        "updated" or "created" when the file was written, None when skipped
    """
    with open(file_path, "r", encoding="utf-8") as f:
        content = f.read()

    match = _FRONT_MATTER.match(content)
    if match:
        if "id" in parse_front_matter(content):
            return None
        new_content = "---\nid: " + slug + "\n" + content[len("---\n"):]
        action = "updated"
    else:
        new_content = f"---\nid: {slug}\ntags: [auto-tagged]\n---\n\n{content}"
        action = "created"

    with open(file_path, "w", encoding="utf-8") as f:
        f.write(new_content)
    return action
