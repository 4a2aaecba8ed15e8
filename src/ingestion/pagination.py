from typing import Callable, Iterator, List, Optional, Tuple, TypeVar


T = TypeVar('T')

PageFetcher = Callable[[Optional[str]], Tuple[List[T], Optional[str]]]


def paginate(fetchPage: PageFetcher, stopOnEmpty: bool = False) -> Iterator[List[T]]:
    """
    Lazily yield pages from a token-chained listing call.

    Each call to the returned generator starts a fresh chain from the first
    page. Iteration ends when the source returns no further token, when it
    hands back the token that was just used (an exhausted forward cursor), or
    (with stopOnEmpty) when a page comes back empty. A consumer that stops
    iterating stops further requests.
    """
    token = None
    while True:
        items, nextToken = fetchPage(token)

        if stopOnEmpty and not items:
            return

        yield items

        if nextToken is None or nextToken == token:
            return
        token = nextToken
