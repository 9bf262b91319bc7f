"""
Document loaders for plain text and markdown files.

Reads the data folder into immutable SourceDocuments with proper error
handling. The folder is never written to.
"""

import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from langchain_community.document_loaders import DirectoryLoader, TextLoader

from portfolio_rag.config.models import SourceDocument
from portfolio_rag.config.settings import get_config
from portfolio_rag.utils.decorators import error_handler_decorator
from portfolio_rag.utils.exceptions import LoadError
from portfolio_rag.utils.logging import get_logger

logger = get_logger(__name__)


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    return extension if extension.startswith(".") else f".{extension}"


class TextDocumentLoader:
    """Loader for every recognised text document under a folder."""

    def __init__(
        self,
        data_folder: Optional[str] = None,
        extensions: Optional[Iterable[str]] = None,
        encoding: str = "utf-8"
    ):
        """
        Initialize text document loader.

        Args:
            data_folder: Path to data folder, uses config default if None
            extensions: File extensions to load, uses config default if None
            encoding: Text encoding of the files
        """
        config = get_config() if data_folder is None or extensions is None else None
        self.data_folder = Path(data_folder if data_folder is not None else config.data.data_folder)
        self.extensions = sorted({
            _normalize_extension(ext)
            for ext in (extensions if extensions is not None else config.data.extensions)
        })
        self.encoding = encoding

    def _check_folder(self) -> None:
        if not self.data_folder.exists():
            raise LoadError(f"Data folder not found: {self.data_folder}")
        if not self.data_folder.is_dir():
            raise LoadError(f"Data folder is not a directory: {self.data_folder}")
        if not os.access(self.data_folder, os.R_OK | os.X_OK):
            raise LoadError(f"Data folder is not readable: {self.data_folder}")

    def _source_name(self, path: str) -> str:
        try:
            return Path(path).relative_to(self.data_folder).as_posix()
        except ValueError:
            return Path(path).as_posix()

    @error_handler_decorator(LoadError)
    def load_documents(self) -> List[SourceDocument]:
        """
        Load documents from the data folder.

        Returns:
            Documents sorted by source name; empty if the folder holds none

        Raises:
            LoadError: If the folder is missing or a file cannot be read
        """
        self._check_folder()
        logger.info(f"📄 Loading {', '.join(self.extensions)} documents from: {self.data_folder}")

        documents: Dict[str, SourceDocument] = {}
        for extension in self.extensions:
            loader = DirectoryLoader(
                str(self.data_folder),
                glob=f"**/*{extension}",
                loader_cls=TextLoader,
                loader_kwargs={"encoding": self.encoding},
                silent_errors=False
            )
            for doc in loader.load():
                source = self._source_name(doc.metadata.get("source", ""))
                documents[source] = SourceDocument(source=source, text=doc.page_content)

        loaded = [documents[source] for source in sorted(documents)]
        if loaded:
            logger.info(f"✅ Loaded {len(loaded)} documents")
        else:
            logger.warning(f"⚠️ No documents found in {self.data_folder}")
        return loaded


def load_text_documents(
    data_folder: Optional[str] = None,
    extensions: Optional[Iterable[str]] = None
) -> List[SourceDocument]:
    """
    Convenience function to load text documents.

    Args:
        data_folder: Path to data folder
        extensions: File extensions to load

    Returns:
        List of loaded documents
    """
    loader = TextDocumentLoader(data_folder, extensions)
    return loader.load_documents()


def build_fallback_context(documents: List[SourceDocument]) -> str:
    """Concatenate every document's text into one context block."""
    return "\n\n".join(doc.text for doc in documents)
