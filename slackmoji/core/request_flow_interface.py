# 2022 A. Shavykin <0.delameter@gmail.com>
# ----------------------------------------
from abc import ABCMeta, abstractmethod


class RequestFlowInterface(metaclass=ABCMeta):
    @abstractmethod
    def __init__(self): raise NotImplementedError

    def reinit(self, requests_estimated: int = None): pass
    def before_paginated_batch(self, url: str): pass
    def after_paginated_batch(self): pass
    def before_request(self, request_num: int): pass
    def before_request_attempt(self, attempt_num: int): pass
    def on_request_failure(self, attempt_num: int, msg: str): pass
    def on_request_completion(self, request_ok: bool, status_code: str, size_b: int = 0): pass
    def on_rate_limited(self, attempt_num: int, retry_after_sec: float): pass
    def before_sleeping(self, delay_sec: float): pass
    def sleep_iterator(self, seconds_left: float): pass
    def after_sleeping(self): pass
    def print_event(self, event_msg: str, persist: bool = False): pass


class SilentRequestFlow(RequestFlowInterface):
    def __init__(self): pass
