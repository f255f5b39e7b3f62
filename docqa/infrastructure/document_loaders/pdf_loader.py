from pathlib import Path

from pypdf import PdfReader

from docqa.core.models.document import LoadedDocument

PAGE_SEPARATOR = "\n\n"


class PDFLoader:

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() == ".pdf"

    def load(self, file_path: Path) -> LoadedDocument:
        reader = PdfReader(file_path)
        text = ""
        page_breaks = []
        for i, page in enumerate(reader.pages):
            page_text = (page.extract_text() or "").strip()
            # blank pages still take a page slot
            if i > 0:
                text += PAGE_SEPARATOR
                page_breaks.append(len(text))
            text += page_text
        return LoadedDocument(
            text=text,
            file_name=file_path.name,
            file_type="pdf",
            page_breaks=page_breaks,
        )
