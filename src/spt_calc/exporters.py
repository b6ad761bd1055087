"""Export reports to Markdown or PDF."""

from pathlib import Path

from spt_calc.config import EXPORT_FORMAT_PDF


def _pdf_safe(text: str) -> str:
    """Core PDF fonts only cover Latin-1."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def markdown_to_pdf(markdown_content: str, output_path: Path) -> None:
    """Convert report markdown to PDF."""
    from fpdf import FPDF
    from fpdf.enums import XPos, YPos

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()
    pdf.set_left_margin(20)
    pdf.set_right_margin(20)

    for line in markdown_content.split("\n"):
        line = line.rstrip()

        if not line:
            pdf.ln(4)
            continue

        clean_line = _pdf_safe(line.replace("**", "").replace("*", ""))
        pdf.set_x(pdf.l_margin)

        if line.startswith("# "):
            pdf.set_font("Helvetica", "B", 16)
            pdf.multi_cell(w=0, h=8, text=clean_line[2:], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(2)
        elif line.startswith("## "):
            pdf.ln(3)
            pdf.set_font("Helvetica", "B", 13)
            pdf.multi_cell(w=0, h=7, text=clean_line[3:], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.ln(1)
        elif line.startswith("---"):
            pdf.ln(2)
            y = pdf.get_y()
            pdf.line(20, y, 190, y)
            pdf.ln(2)
        elif line.startswith("- "):
            pdf.set_font("Helvetica", "", 10)
            pdf.multi_cell(w=0, h=5, text="  * " + clean_line[2:], new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        # Table separator row
        elif line.startswith("|") and "---" in line:
            continue
        elif line.startswith("|"):
            pdf.set_font("Courier", "", 9)
            cells = [c.strip() for c in clean_line.split("|") if c.strip()]
            pdf.multi_cell(
                w=0, h=5, text="  ".join(f"{c:<12}" for c in cells),
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        else:
            pdf.set_font("Helvetica", "", 10)
            pdf.multi_cell(w=0, h=5, text=clean_line, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.output(str(output_path))


def export_to_file(content: str, output_path: Path, format: str = "md") -> Path:
    """
    Write a Markdown report, converting to PDF if requested.

    Args:
        content: Markdown report
        output_path: Destination; the suffix is corrected to match the format
        format: "md" or "pdf"

    Returns:
        The path actually written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if format.lower() == EXPORT_FORMAT_PDF:
        if output_path.suffix.lower() != ".pdf":
            output_path = output_path.with_suffix(".pdf")
        markdown_to_pdf(content, output_path)
    else:
        if output_path.suffix.lower() != ".md":
            output_path = output_path.with_suffix(".md")
        output_path.write_text(content, encoding="utf-8")

    return output_path
