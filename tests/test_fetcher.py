"""
Unit Tests for event fetching
"""

import unittest

from ingestion.fetcher import EventFetcher
from utils.errors import TransientFetchError
from utils.metrics import MetricsCollector

from fakes import FakeLogSource, stream, event


class TestEventFetcher(unittest.TestCase):

    def setUp(self):
        self.stream = stream('s1', 100, 900)

    def testFiltersByIngestionTime(self):
        pages = [[event(40), event(50), event(60)], [event(70)]]
        source = FakeLogSource(events={('app', 's1'): pages})
        metrics = MetricsCollector()

        drained = list(EventFetcher(source, metrics).drain('app', self.stream, 50))

        self.assertEqual([e.ingestionTime for e in drained], [60, 70])
        self.assertEqual(metrics.events_fetched, 4)
        self.assertEqual(metrics.events_filtered, 2)

    def testRequestsFromHeadFollowingForwardTokens(self):
        pages = [[event(60)], [event(70)], [event(80)]]
        source = FakeLogSource(events={('app', 's1'): pages})

        list(EventFetcher(source).drain('app', self.stream, 0))

        self.assertEqual([call[2] for call in source.callsOf('events')], [None, '1', '2'])

    def testStopsOnEmptyPage(self):
        pages = [[event(60)], [], [event(70)]]
        source = FakeLogSource(events={('app', 's1'): pages})

        drained = list(EventFetcher(source).drain('app', self.stream, 0))

        self.assertEqual([e.ingestionTime for e in drained], [60])
        self.assertEqual(len(source.callsOf('events')), 2)

    def testStopsOnRepeatedForwardToken(self):
        class EndOfStreamSource(FakeLogSource):
            # CloudWatch hands back the same forward token at the end of a stream
            def getEvents(self, group, stream, token=None):
                self.calls.append(('events', (group, stream), token))
                if token is None:
                    return [event(60)], 'f/1'
                return [event(70)], 'f/1'

        source = EndOfStreamSource()
        drained = list(EventFetcher(source).drain('app', self.stream, 0))

        self.assertEqual([e.ingestionTime for e in drained], [60, 70])
        self.assertEqual(len(source.callsOf('events')), 2)

    def testIsLazy(self):
        source = FakeLogSource(events={('app', 's1'): [[event(60)], [event(70)]]})
        drained = EventFetcher(source).drain('app', self.stream, 0)

        self.assertEqual(source.calls, [])
        next(drained)
        self.assertEqual(len(source.callsOf('events')), 1)

    def testEachDrainRestartsFromHead(self):
        source = FakeLogSource(events={('app', 's1'): [[event(60)], [event(70)]]})
        fetcher = EventFetcher(source)

        first = [e.ingestionTime for e in fetcher.drain('app', self.stream, 0)]
        second = [e.ingestionTime for e in fetcher.drain('app', self.stream, 65)]

        self.assertEqual(first, [60, 70])
        self.assertEqual(second, [70])

    def testErrorPropagates(self):
        source = FakeLogSource(failures={('events', 'app')})
        with self.assertRaises(TransientFetchError):
            list(EventFetcher(source).drain('app', self.stream, 0))


if __name__ == '__main__':
    unittest.main()
