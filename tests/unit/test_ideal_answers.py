import ideal_answers.ideal_answers as ia_mod
from llm_gateway import FixedIntervalThrottle, LlmGatewayError


def test_fallback_mentions_question_and_requirements():
    text = ia_mod.fallback_answer("  Why Python?  ")
    assert text.startswith('A strong answer to "Why Python?"')
    assert "should address the main requirements" in text


def test_failures_are_replaced_per_question():
    def flaky(question):
        if question == "Q2":
            raise LlmGatewayError("upstream down")
        return f"Model answer for {question}"

    answers = ia_mod.ideal_answers_for(["Q1", "Q2", "Q3"], flaky)
    assert answers[0] == "Model answer for Q1"
    assert answers[1] == ia_mod.fallback_answer("Q2")
    assert answers[2] == "Model answer for Q3"


def test_always_failing_generator_yields_one_fallback_each():
    def broken(question):
        raise RuntimeError("nope")

    questions = ["Q1", "Q2", "Q3", "Q4"]
    answers = ia_mod.ideal_answers_for(questions, broken)
    assert answers == [ia_mod.fallback_answer(q) for q in questions]


def test_blank_replies_and_missing_generator_use_fallback():
    assert ia_mod.ideal_answers_for(["Q1"], lambda q: "   ") == [ia_mod.fallback_answer("Q1")]
    assert ia_mod.ideal_answers_for(["Q1", "Q2"], None) == [
        ia_mod.fallback_answer("Q1"),
        ia_mod.fallback_answer("Q2"),
    ]


def test_generator_calls_gateway_with_role_context(monkeypatch, route):
    captured = {}

    def fake_call(task, schema, *, cfg, client=None, throttle=None, **_):
        captured["task"] = task
        captured["schema"] = schema
        return schema(answer="  I would start by clarifying requirements.  ")

    monkeypatch.setattr(ia_mod, "call", fake_call)
    generator = ia_mod.IdealAnswerGenerator(route)
    answer = generator("How do you design an API?", job_role="Backend Engineer", experience="3 years")

    assert answer == "I would start by clarifying requirements."
    assert captured["schema"] is ia_mod.IdealAnswer
    assert "3 years Backend Engineer" in captured["task"]
    assert "Question: How do you design an API?" in captured["task"]


class RateLimitedClient:
    def __init__(self):
        self.posts = 0

    def post(self, url, *, json, headers, timeout):
        self.posts += 1
        return RateLimitedResponse()


class RateLimitedResponse:
    status_code = 429
    text = "slow down"

    def json(self):
        return {}


def test_rate_limited_ideal_answer_fails_fast(route):
    client = RateLimitedClient()
    backoff = []
    generator = ia_mod.IdealAnswerGenerator(route, client=client, sleep=backoff.append)
    answers = ia_mod.ideal_answers_for(["Q1", "Q2"], generator)
    assert answers == [ia_mod.fallback_answer("Q1"), ia_mod.fallback_answer("Q2")]
    assert client.posts == 2
    assert backoff == []


def test_budget_stops_requests_once_spent(fake_clock):
    calls = []

    def slow(question):
        calls.append(question)
        fake_clock.now += 6
        return f"Answer {question}"

    answers = ia_mod.ideal_answers_for(["Q1", "Q2", "Q3", "Q4"], slow, budget_s=10, clock=fake_clock)
    assert calls == ["Q1", "Q2"]
    assert answers[:2] == ["Answer Q1", "Answer Q2"]
    assert answers[2:] == [ia_mod.fallback_answer("Q3"), ia_mod.fallback_answer("Q4")]


def test_throttled_generator_shares_interval(route, fake_clock):
    client = RateLimitedClient()
    throttle = FixedIntervalThrottle(1.0, clock=fake_clock, sleep=fake_clock.sleep)
    generator = ia_mod.IdealAnswerGenerator(route, client=client, throttle=throttle)
    ia_mod.ideal_answers_for(["Q1", "Q2", "Q3"], generator)
    assert fake_clock.sleeps == [1.0, 1.0]
