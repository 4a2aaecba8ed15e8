# CloudWatch Logs source backed by boto3

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, BotoCoreError
from typing import Dict, Any, Optional, List, Tuple

from .base import BaseLogSource
from .models import LogStream, LogEvent
from utils.errors import TransientFetchError


DEFAULT_REGION = 'us-east-1'


class CloudWatchLogsClient(BaseLogSource):

    def __init__(self, config: Dict[str, Any], client=None, stsClient=None):
        # Prebuilt clients may be supplied (e.g. stubbed in tests)
        self.logsClient = client
        self.stsClient = stsClient
        super().__init__(config)

    def _initializeClient(self) -> None:
        if self.logsClient is not None:
            return

        try:
            sessionConfig = {
                'region_name': self.config.get('region', DEFAULT_REGION)
            }

            if self.config.get('profile'):
                sessionConfig['profile_name'] = self.config['profile']

            # Add credentials if provided
            if 'access_key_id' in self.config and 'secret_access_key' in self.config:
                sessionConfig['aws_access_key_id'] = self.config['access_key_id']
                sessionConfig['aws_secret_access_key'] = self.config['secret_access_key']
                if self.config.get('session_token'):
                    sessionConfig['aws_session_token'] = self.config['session_token']

            session = boto3.session.Session(**sessionConfig)

            clientConfig = Config(
                retries={
                    'max_attempts': int(self.config.get('max_attempts', 5)),
                    'mode': 'standard'
                },
                connect_timeout=self.config.get('connect_timeout', 10),
                read_timeout=self.config.get('read_timeout', 30)
            )

            clientKwargs = {'config': clientConfig}
            if self.config.get('endpoint_url'):
                clientKwargs['endpoint_url'] = self.config['endpoint_url']

            self.logsClient = session.client('logs', **clientKwargs)
            self.stsClient = session.client('sts')

            self.logger.info(f"CloudWatch Logs client initialized for region {sessionConfig['region_name']}")
        except (ClientError, BotoCoreError) as e:
            self.handleError(e, "CloudWatch Logs client initialization")
            raise

    def getRequiredFields(self) -> List[str]:
        return ['log_group']

    def testConnection(self) -> bool:
        if self.stsClient is None:
            return False
        try:
            response = self.stsClient.get_caller_identity()
            self.logger.info(f"AWS connection successful. Account: {response['Account']}")
            return True
        except (ClientError, BotoCoreError) as e:
            self.handleError(e, "AWS connection test")
            return False

    def listGroups(self, prefix: str, token: Optional[str] = None) -> Tuple[List[str], Optional[str]]:
        params = {}
        if prefix:
            params['logGroupNamePrefix'] = prefix
        if token is not None:
            params['nextToken'] = token

        try:
            response = self.logsClient.describe_log_groups(**params)
        except (ClientError, BotoCoreError) as e:
            raise TransientFetchError('DescribeLogGroups', e) from e

        names = [group['logGroupName'] for group in response.get('logGroups', [])]
        return names, response.get('nextToken')

    def listStreams(self, group: str, token: Optional[str] = None) -> Tuple[List[LogStream], Optional[str]]:
        params = {
            'logGroupName': group,
            'orderBy': 'LastEventTime',
            'descending': True
        }
        if token is not None:
            params['nextToken'] = token

        try:
            response = self.logsClient.describe_log_streams(**params)
        except (ClientError, BotoCoreError) as e:
            raise TransientFetchError('DescribeLogStreams', e) from e

        streams = [LogStream.fromApi(stream) for stream in response.get('logStreams', [])]
        return streams, response.get('nextToken')

    def getEvents(
        self,
        group: str,
        stream: str,
        token: Optional[str] = None
    ) -> Tuple[List[LogEvent], Optional[str]]:
        params = {
            'logGroupName': group,
            'logStreamName': stream,
            'startFromHead': True
        }
        if token is not None:
            params['nextToken'] = token

        try:
            response = self.logsClient.get_log_events(**params)
        except (ClientError, BotoCoreError) as e:
            raise TransientFetchError('GetLogEvents', e) from e

        events = [LogEvent.fromApi(event) for event in response.get('events', [])]
        return events, response.get('nextForwardToken')
