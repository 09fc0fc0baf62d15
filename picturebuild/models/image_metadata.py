from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional

SVG_KEY = "_svg"


class Asset(BaseModel):
    filename: str
    width: int
    height: int
    size: int
    format: str


class RenditionSet(BaseModel):
    """The three encodings of one resized rendition."""

    avif: Asset
    webp: Asset
    png: Asset

    @property
    def width(self) -> int:
        return self.png.width

    @property
    def height(self) -> int:
        return self.png.height


class SrcsetEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    avif: str
    webp: str
    png: str
    width: int


class VariantEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    # fallback rendition, one filename per format
    avif: str
    webp: str
    png: str
    width: int
    height: int
    srcset: Optional[List[SrcsetEntry]] = None
    sizes: Optional[str] = None

    @classmethod
    def from_renditions(
        cls, renditions: List[RenditionSet], sizes: Optional[str] = None
    ):
        fallback = renditions[-1]
        entry = {
            "avif": fallback.avif.filename,
            "webp": fallback.webp.filename,
            "png": fallback.png.filename,
            "width": fallback.width,
            "height": fallback.height,
        }
        # sizes is only given for images configured with a widths list
        if sizes is not None:
            entry["srcset"] = [
                SrcsetEntry(
                    avif=r.avif.filename,
                    webp=r.webp.filename,
                    png=r.png.filename,
                    width=r.width,
                )
                for r in renditions
            ]
            entry["sizes"] = sizes
        return cls(**entry)


class Manifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    images: Dict[str, VariantEntry] = {}
    svg: Optional[Dict[str, str]] = None

    def with_vector_map(self, svg: Dict[str, str]) -> "Manifest":
        return self.model_copy(update={"svg": dict(svg)})

    def to_json_dict(self) -> dict:
        data = {
            name: entry.model_dump(exclude_none=True)
            for name, entry in self.images.items()
        }
        if self.svg is not None:
            data[SVG_KEY] = dict(self.svg)
        return data

    @classmethod
    def from_json_dict(cls, data: dict) -> "Manifest":
        return cls(
            images={
                name: VariantEntry(**entry)
                for name, entry in data.items()
                if name != SVG_KEY
            },
            svg=data.get(SVG_KEY),
        )
