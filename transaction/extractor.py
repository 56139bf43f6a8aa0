import re
from base64 import b64decode
from typing import Awaitable, Callable, List, Mapping, Optional, Sequence

from transaction.dom    import Element, get_attribute, query_selector, query_selector_all
from transaction.errors import FrameIndexError, IndicesNotFoundError, InvalidFrameError, MissingKeyError
from transaction.models import IndexSet
from observability      import get_logger

logger = get_logger(__name__)

Fetch = Callable[..., Awaitable[str]]

ON_DEMAND_FILE_URL = "https://abs.twimg.com/responsive-web/client-web/ondemand.s.{filename}a.js"
ON_DEMAND_FILE_REGEX = re.compile(r"""['|"]{1}ondemand\.s['|"]{1}:\s*['|"]{1}([\w]*)['|"]{1}""", re.MULTILINE)
INDICES_REGEX = re.compile(r"""(\(\w{1}\[(\d{1,2})\],\s*16\))+""", re.MULTILINE)
NUMBER_REGEX = re.compile(r"-?\d+(?:\.\d+)?")

SITE_VERIFICATION_SELECTOR = "meta[name='twitter-site-verification']"
FRAME_ID_MARKER = "loading-x-anim"
MIN_FRAME_LENGTH = 10


def get_key(document: Element) -> str:
    element = query_selector(document, SITE_VERIFICATION_SELECTOR)
    if element is None:
        raise MissingKeyError("Couldn't get key from the page source")

    content = get_attribute(element, "content")
    if not content:
        raise MissingKeyError("No content attribute in twitter-site-verification meta tag")

    return content


def get_key_bytes(key: str) -> List[int]:
    padded = key + "=" * (-len(key) % 4)
    return list(b64decode(padded))


def find_ondemand_url(source: str, url_template: str = ON_DEMAND_FILE_URL) -> Optional[str]:
    match = ON_DEMAND_FILE_REGEX.search(source)
    if not match:
        return None
    return url_template.format(filename=match.group(1))


def parse_indices(script_text: str) -> IndexSet:
    """Collect every ``(x[NN], 16)`` index; the first is the row index."""
    indices = [int(match.group(2)) for match in INDICES_REGEX.finditer(script_text) if match.group(2)]

    if len(indices) < 2:
        raise IndicesNotFoundError(f"Couldn't get KEY_BYTE indices (found {len(indices)})")

    return IndexSet(row_index=indices[0], key_byte_indices=tuple(indices[1:]))


async def get_indices(
    document: Element,
    fetch: Fetch,
    headers: Optional[Mapping[str, str]] = None,
    url_template: str = ON_DEMAND_FILE_URL
) -> IndexSet:
    """
    Locate the on-demand script referenced by the home page and read its indices.

    Args:
        document: Parsed home page
        fetch: Coroutine ``fetch(method, url, headers)`` returning the body text
        headers: Headers forwarded to the fetch
        url_template: Script URL with a ``{filename}`` placeholder

    Returns:
        The row index and key byte indices

    Raises:
        IndicesNotFoundError: If the script reference or its indices are missing
    """
    ondemand_url = find_ondemand_url(document.raw_source, url_template)
    if ondemand_url is None:
        raise IndicesNotFoundError("Couldn't find the on-demand script in the page source")

    logger.info(f"Fetching on-demand script: {ondemand_url}")
    script_text = await fetch("GET", ondemand_url, dict(headers or {}))

    index_set = parse_indices(script_text)
    logger.info(
        f"Found {len(index_set.key_byte_indices)} key byte indices",
        extra={"row_index": index_set.row_index, "key_byte_indices": list(index_set.key_byte_indices)}
    )
    return index_set


def get_frames(document: Element) -> List[Element]:
    return [
        svg for svg in query_selector_all(document, "svg")
        if FRAME_ID_MARKER in (get_attribute(svg, "id") or "")
    ]


def extract_numbers(path_data: str) -> List[float]:
    return [float(token) for token in NUMBER_REGEX.findall(path_data)]


def get_frame(key_bytes: Sequence[int], document: Element) -> List[float]:
    """
    Select the animation frame chosen by ``key_bytes[5]`` and flatten its path data.

    The numbers of every path's ``d`` attribute are concatenated in document
    order and zero padded to at least ``MIN_FRAME_LENGTH`` entries.
    """
    frames = get_frames(document)
    if not frames:
        raise FrameIndexError("No animation frames found in the page source")

    frame_index = key_bytes[5] % len(frames)
    logger.debug(
        f"Selected animation frame {frame_index} of {len(frames)}",
        extra={"frame_index": frame_index, "frame_count": len(frames)}
    )

    paths = query_selector_all(frames[frame_index], "path")
    if not paths:
        raise InvalidFrameError(f"No path elements found in frame {frame_index}")

    numbers: List[float] = []
    for path in paths:
        path_data = get_attribute(path, "d")
        if not path_data:
            logger.warning("Path element missing 'd' attribute")
            continue

        values = extract_numbers(path_data)
        if not values:
            logger.warning("No numbers found in path data")
            continue

        numbers.extend(values)

    if len(numbers) < MIN_FRAME_LENGTH:
        numbers.extend([0.0] * (MIN_FRAME_LENGTH - len(numbers)))

    return numbers
