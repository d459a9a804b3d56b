# src/fragment_table_extractor/parser.py
"""Fuentes de fragmentos para el shell: documentos JSON y archivos hOCR.

El núcleo de extracción no lee archivos; estas funciones sólo producen la
secuencia ordenada de páginas de TextFragment que el núcleo espera.
"""
from __future__ import annotations
import json
import re
from typing import Any, Dict, List, Optional, Tuple
from bs4 import BeautifulSoup

from .structures import Rect, TextFragment

BBOX_RE = re.compile(r"bbox (-?\d+)\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)")

Page = List[TextFragment]


def parse_bbox(title_attr: str) -> Optional[Tuple[int, int, int, int]]:
    if not title_attr:
        return None
    m = BBOX_RE.search(title_attr)
    if not m:
        return None
    x1, y1, x2, y2 = map(int, m.groups())
    return x1, y1, x2, y2


def _fragment_from_dict(item: Any, where: str) -> TextFragment:
    if not isinstance(item, dict) or "text" not in item or "bbox" not in item:
        raise ValueError(f"{where}: expected an object with 'text' and 'bbox'")
    bb = item["bbox"]
    try:
        rect = Rect(x=float(bb["x"]), y=float(bb["y"]),
                    width=float(bb["width"]), height=float(bb["height"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"{where}: invalid bbox {bb!r}") from exc
    return TextFragment(text=str(item["text"]), bbox=rect)


def pages_from_json_data(data: Any) -> List[Page]:
    """Acepta {"pages": [...]} o una lista de páginas; cada página es una lista de
    fragmentos o {"pageIndex": n, "items": [...]}."""
    raw_pages = data.get("pages") if isinstance(data, dict) else data
    if not isinstance(raw_pages, list):
        raise ValueError("Expected a list of pages or an object with a 'pages' list")

    indexed: Dict[int, Page] = {}
    for pos, raw in enumerate(raw_pages):
        if isinstance(raw, dict):
            index = int(raw.get("pageIndex", pos))
            items = raw.get("items", [])
        else:
            index, items = pos, raw
        if not isinstance(items, list):
            raise ValueError(f"page {index}: items must be a list")
        if index in indexed:
            raise ValueError(f"page {index}: duplicated pageIndex")
        indexed[index] = [_fragment_from_dict(it, f"page {index}, item {i}")
                          for i, it in enumerate(items)]

    if not indexed:
        return []
    if min(indexed) < 0:
        raise ValueError("pageIndex must be >= 0")
    return [indexed.get(i, []) for i in range(max(indexed) + 1)]


def load_json_pages(path: str) -> List[Page]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return pages_from_json_data(data)


def _load_soup(text: str) -> BeautifulSoup:
    """
    Intenta XML (lxml-xml) y, si no hay nodos HOCR, fallback a HTML (lxml).
    """
    soup_xml = BeautifulSoup(text, "lxml-xml")
    if soup_xml.find(class_=lambda c: c and "ocr_page" in c):
        return soup_xml
    return BeautifulSoup(text, "lxml")


Span = Tuple[int, int, int, int, str]


def _merge_adjacent(words: List[Span], gap_ratio: float) -> List[Span]:
    """Une palabras contiguas de una misma línea en spans separados por un espacio.

    Dos palabras se unen si el hueco entre ellas es <= gap_ratio * altura de palabra.
    """
    if not words:
        return []
    toks = sorted(words, key=lambda t: t[0])
    spans: List[Span] = []
    x1, y1, x2, y2, text = toks[0]
    buf = [text]
    for wx1, wy1, wx2, wy2, wtext in toks[1:]:
        max_gap = gap_ratio * max(y2 - y1, wy2 - wy1)
        if wx1 - x2 <= max_gap:
            buf.append(wtext)
            x2, y1, y2 = max(x2, wx2), min(y1, wy1), max(y2, wy2)
        else:
            spans.append((x1, y1, x2, y2, " ".join(buf)))
            x1, y1, x2, y2, buf = wx1, wy1, wx2, wy2, [wtext]
    spans.append((x1, y1, x2, y2, " ".join(buf)))
    return spans


def _word_spans(node) -> List[Span]:
    out: List[Span] = []
    for w in node.find_all(class_=lambda c: c and "ocrx_word" in c):
        bb = parse_bbox(w.get("title", ""))
        text = (w.get_text() or "").strip()
        if bb and text:
            out.append((*bb, text))
    return out


def pages_from_hocr_text(raw: str, gap_ratio: float = 0.8) -> List[Page]:
    """Cada ocr_page es una página; las palabras de cada ocr_line se fusionan en
    fragmentos.

    hOCR usa y hacia abajo, así que se invierte con la altura de la página.
    """
    soup = _load_soup(raw)
    pages: List[Page] = []
    for page in soup.find_all(class_=lambda c: c and "ocr_page" in c):
        lines = page.find_all(class_=lambda c: c and "ocr_line" in c)
        spans: List[Span] = []
        if lines:
            for line in lines:
                spans.extend(_merge_adjacent(_word_spans(line), gap_ratio))
        else:
            # sin ocr_line: cada palabra es su propio fragmento
            spans = _word_spans(page)

        page_box = parse_bbox(page.get("title", ""))
        if page_box:
            page_height = page_box[3]
        else:
            page_height = max((s[3] for s in spans), default=0)

        pages.append([
            TextFragment(text=text,
                         bbox=Rect(x=float(x1), y=float(page_height - y2),
                                   width=float(x2 - x1), height=float(y2 - y1)))
            for (x1, y1, x2, y2, text) in spans
        ])
    return pages


def load_hocr_pages(path: str, gap_ratio: float = 0.8) -> List[Page]:
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()
    return pages_from_hocr_text(raw, gap_ratio=gap_ratio)


def load_pages(path: str, fmt: str = "auto") -> List[Page]:
    fmt = (fmt or "auto").lower()
    if fmt == "auto":
        fmt = "hocr" if path.lower().endswith((".hocr", ".html", ".htm", ".xml")) else "json"
    if fmt == "json":
        return load_json_pages(path)
    if fmt == "hocr":
        return load_hocr_pages(path)
    raise ValueError(f"Formato de entrada desconocido: {fmt!r}")
