from pathlib import Path

from docx import Document

from docqa.core.models.document import LoadedDocument


class DocxLoader:

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() == ".docx"

    def load(self, file_path: Path) -> LoadedDocument:
        doc = Document(file_path)
        paragraphs = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
        return LoadedDocument(
            text="\n\n".join(paragraphs),
            file_name=file_path.name,
            file_type="docx",
        )
