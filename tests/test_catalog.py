"""
Unit Tests for log group and log stream discovery
"""

import unittest

from ingestion.catalog import GroupCatalog, StreamCatalog
from ingestion.pagination import paginate
from utils.errors import TransientFetchError
from utils.metrics import MetricsCollector

from fakes import FakeLogSource, stream


class TestPaginate(unittest.TestCase):

    def testFollowsTokensUntilExhausted(self):
        responses = {None: ([1, 2], 'a'), 'a': ([3], 'b'), 'b': ([4], None)}
        pages = list(paginate(lambda token: responses[token]))
        self.assertEqual(pages, [[1, 2], [3], [4]])

    def testStopsOnRepeatedToken(self):
        responses = {None: ([1], 'a'), 'a': ([2], 'a')}
        pages = list(paginate(lambda token: responses[token]))
        self.assertEqual(pages, [[1], [2]])

    def testStopOnEmptyPage(self):
        responses = {None: ([1], 'a'), 'a': ([], 'b'), 'b': ([2], None)}
        self.assertEqual(list(paginate(lambda token: responses[token], stopOnEmpty=True)), [[1]])
        self.assertEqual(list(paginate(lambda token: responses[token])), [[1], [], [2]])

    def testIsLazy(self):
        requested = []

        def fetch(token):
            requested.append(token)
            return [token], (token or 0) + 1

        pages = paginate(fetch)
        self.assertEqual(requested, [])
        next(pages)
        next(pages)
        self.assertEqual(requested, [None, 1])


class TestGroupCatalog(unittest.TestCase):

    def testListsEveryPage(self):
        source = FakeLogSource(groups={'app-': [['app-a', 'app-b'], ['app-c'], ['app-d']]})
        self.assertEqual(GroupCatalog(source).list('app-'), ['app-a', 'app-b', 'app-c', 'app-d'])
        self.assertEqual([call[2] for call in source.callsOf('groups')], [None, '1', '2'])

    def testEachGroupAppearsOnce(self):
        source = FakeLogSource(groups={'app-': [['app-a', 'app-b'], ['app-b', 'app-c']]})
        self.assertEqual(GroupCatalog(source).list('app-'), ['app-a', 'app-b', 'app-c'])

    def testNoMatches(self):
        self.assertEqual(GroupCatalog(FakeLogSource()).list('nothing-'), [])

    def testErrorPropagates(self):
        source = FakeLogSource(failures={('groups', 'app-')})
        with self.assertRaises(TransientFetchError):
            GroupCatalog(source).list('app-')


class TestStreamCatalog(unittest.TestCase):

    def testPaginationCompleteness(self):
        pages = [
            [stream('s6', 600), stream('s5', 500)],
            [stream('s4', 400), stream('s3', 300)],
            [stream('s2', 200), stream('s1', 100)],
        ]
        source = FakeLogSource(streams={'app': pages})

        result = StreamCatalog(source).listNewStreams('app', 50)

        self.assertEqual([s.name for s in result], ['s1', 's2', 's3', 's4', 's5', 's6'])
        self.assertEqual(len(source.callsOf('streams')), 3)

    def testStopsAtFirstOlderStream(self):
        source = FakeLogSource(streams={'app': [[stream('A', 100), stream('B', 40)]]})

        result = StreamCatalog(source).listNewStreams('app', 50)

        self.assertEqual([s.name for s in result], ['A'])

    def testNoFurtherPagesAfterOlderStream(self):
        pages = [
            [stream('s4', 400), stream('s3', 300)],
            [stream('s2', 200), stream('old', 10), stream('never-seen', 300)],
            [stream('s0', 900)],
        ]
        source = FakeLogSource(streams={'app': pages})
        metrics = MetricsCollector()

        result = StreamCatalog(source, metrics).listNewStreams('app', 50)

        self.assertEqual([s.name for s in result], ['s2', 's3', 's4'])
        self.assertEqual(len(source.callsOf('streams')), 2)
        self.assertEqual(metrics.streams_scanned, 4)

    def testStreamEqualToWatermarkDoesNotQualify(self):
        source = FakeLogSource(streams={'app': [[stream('A', 50)]]})
        self.assertEqual(StreamCatalog(source).listNewStreams('app', 50), [])

    def testStreamWithoutEventsEndsScan(self):
        source = FakeLogSource(streams={'app': [[stream('A', 100), stream('empty', None), stream('C', 90)]]})
        result = StreamCatalog(source).listNewStreams('app', 50)
        self.assertEqual([s.name for s in result], ['A'])

    def testEmptyGroup(self):
        self.assertEqual(StreamCatalog(FakeLogSource()).listNewStreams('app', 1), [])

    def testErrorPropagates(self):
        source = FakeLogSource(failures={('streams', 'app')})
        with self.assertRaises(TransientFetchError):
            StreamCatalog(source).listNewStreams('app', 1)


if __name__ == '__main__':
    unittest.main()
