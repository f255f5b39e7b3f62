from pathlib import Path

from docqa.core.models.document import LoadedDocument


class TextLoader:

    EXTENSIONS = {".txt", ".md", ".markdown"}

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self.EXTENSIONS

    def load(self, file_path: Path) -> LoadedDocument:
        return LoadedDocument(
            text=file_path.read_text(encoding="utf-8"),
            file_name=file_path.name,
            file_type=file_path.suffix.lower().lstrip("."),
        )
