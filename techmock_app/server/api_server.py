"""FastAPI server exposing the browser app and its JSON API."""

from __future__ import annotations

import secrets
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
import uvicorn

from techmock_app.constants.about import APP_NAME, APP_VERSION
from techmock_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, SESSION_COOKIE_NAME
from techmock_app.constants.test_constants import (
    DEFAULT_GENERATION_COUNT,
    MAX_GENERATION_COUNT,
    PASS_THRESHOLD_PERCENT,
)
from techmock_app.core.markdown_math_renderer import renderer
from techmock_app.core.mock_test_manager import MockTestManager
from techmock_app.core.models import Question, TestResult, User, UserRole
from techmock_app.core.services.result_review import ResultReview, is_passing

_APP_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>TechMock</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #f3f4f6; color: #111827; }
      body { margin: 0; }
      header { background: #ffffff; border-bottom: 1px solid #e5e7eb; padding: 0.75rem 1.5rem; display: flex; align-items: center; gap: 1rem; flex-wrap: wrap; }
      header .brand { font-weight: 700; font-size: 1.2rem; color: #2563eb; margin-right: auto; }
      header a { color: #374151; text-decoration: none; font-weight: 500; }
      header a.active { color: #2563eb; }
      main { max-width: 56rem; margin: 0 auto; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #ffffff; border: 1px solid #e5e7eb; border-radius: 0.75rem; padding: 1.25rem; }
      .hidden { display: none; }
      .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(10rem, 1fr)); gap: 1rem; }
      .stat-value { font-size: 2rem; font-weight: 700; }
      .muted { color: #6b7280; }
      .error { color: #dc2626; min-height: 1.25rem; }
      label { display: block; font-weight: 500; margin-top: 0.75rem; }
      input, select, textarea { width: 100%; box-sizing: border-box; padding: 0.55rem; border: 1px solid #d1d5db; border-radius: 0.5rem; font: inherit; }
      .primary-button, .secondary-button, .danger-button { border: none; border-radius: 0.5rem; padding: 0.6rem 1.2rem; font: inherit; cursor: pointer; }
      .primary-button { background: #2563eb; color: #ffffff; }
      .secondary-button { background: #ffffff; color: #374151; border: 1px solid #d1d5db; }
      .danger-button { background: #fee2e2; color: #b91c1c; }
      button:disabled { opacity: 0.6; cursor: not-allowed; }
      .option { display: flex; align-items: center; gap: 0.5rem; padding: 0.6rem 0.8rem; margin-top: 0.5rem; border: 1px solid #e5e7eb; border-radius: 0.5rem; cursor: pointer; }
      .option.selected { border-color: #2563eb; background: #eff6ff; }
      .option.correct { border-color: #16a34a; background: #f0fdf4; }
      .option.wrong { border-color: #dc2626; background: #fef2f2; }
      .progress-track { height: 0.5rem; background: #e5e7eb; border-radius: 999px; overflow: hidden; }
      .progress-fill { height: 100%; background: #2563eb; transition: width 200ms ease; }
      .pass { color: #15803d; }
      .fail { color: #b91c1c; }
      .row { display: flex; align-items: center; gap: 0.75rem; justify-content: space-between; }
      .list-item { padding: 0.75rem 0; border-bottom: 1px solid #f3f4f6; cursor: pointer; }
      .trend { display: flex; align-items: flex-end; gap: 0.4rem; height: 8rem; }
      .trend-bar { flex: 1; background: #93c5fd; border-radius: 0.25rem 0.25rem 0 0; min-height: 2px; }
      .tag { font-size: 0.8rem; background: #eef2ff; color: #4338ca; border-radius: 999px; padding: 0.1rem 0.6rem; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] } };
    </script>
    <script defer src=\"https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js\"></script>
  </head>
  <body>
    <header id=\"nav\" class=\"hidden\">
      <span class=\"brand\">TechMock</span>
      <a href=\"#/dashboard\" data-route=\"dashboard\" data-role=\"student\">Dashboard</a>
      <a href=\"#/history\" data-route=\"history\" data-role=\"student\">History</a>
      <a href=\"#/admin\" data-route=\"admin\" data-role=\"admin\">Question Bank</a>
      <span id=\"nav-user\" class=\"muted\"></span>
      <button id=\"logout-button\" class=\"secondary-button\">Logout</button>
    </header>
    <main id=\"app\"></main>
    <script>
      const PASS_THRESHOLD = __PASS_THRESHOLD__;
      const DEFAULT_GENERATION_COUNT = __DEFAULT_GENERATION_COUNT__;
      const LETTERS = ['A', 'B', 'C', 'D'];
      const appEl = document.getElementById('app');
      const navEl = document.getElementById('nav');
      const navUserEl = document.getElementById('nav-user');

      let currentUser = null;
      let currentAttempt = null;
      let attemptAnswers = {};
      let isGenerating = false;

      function el(tag, attrs = {}, children = []) {
        const node = document.createElement(tag);
        for (const [key, value] of Object.entries(attrs)) {
          if (key === 'text') node.textContent = value;
          else if (key === 'html') node.innerHTML = value;
          else if (key === 'onclick') node.addEventListener('click', value);
          else if (key === 'onsubmit') node.addEventListener('submit', value);
          else node.setAttribute(key, value);
        }
        for (const child of children) {
          if (child) node.appendChild(child);
        }
        return node;
      }

      function typeset() {
        if (window.MathJax && window.MathJax.typesetPromise) {
          window.MathJax.typesetPromise().catch(() => {});
        }
      }

      async function api(path, options = {}) {
        const response = await fetch(path, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        let body = null;
        try {
          body = await response.json();
        } catch (error) {
          body = null;
        }
        if (!response.ok) {
          const detail = body ? body.detail : null;
          let message = 'Request failed.';
          if (typeof detail === 'string') message = detail;
          else if (Array.isArray(detail)) message = detail.map(item => item.msg).join('; ');
          const failure = new Error(message);
          failure.status = response.status;
          throw failure;
        }
        return body;
      }

      function formatDate(timestamp) {
        return new Date(timestamp).toLocaleString();
      }

      function scoreClass(percentage) {
        return percentage >= PASS_THRESHOLD ? 'pass' : 'fail';
      }

      function showPage(...children) {
        appEl.replaceChildren(...children);
        typeset();
      }

      function updateNav(route) {
        setVisible(navEl, currentUser !== null);
        if (!currentUser) return;
        navUserEl.textContent = `${currentUser.name} (${currentUser.role})`;
        navEl.querySelectorAll('a').forEach(link => {
          setVisible(link, link.dataset.role === currentUser.role);
          link.classList.toggle('active', link.dataset.route === route);
        });
      }

      function setVisible(element, isVisible) {
        element.classList.toggle('hidden', !isVisible);
      }

      // --- Login / Register ---

      function renderLogin() {
        let isRegistering = false;
        const errorEl = el('p', { class: 'error' });
        const nameRow = el('div', {}, [el('label', { text: 'Full name', for: 'name-input' }), el('input', { id: 'name-input', autocomplete: 'name' })]);
        const roleSelect = el('select', { id: 'role-input' }, [
          el('option', { value: 'student', text: 'Student' }),
          el('option', { value: 'admin', text: 'Admin' }),
        ]);
        const roleRow = el('div', {}, [el('label', { text: 'Role', for: 'role-input' }), roleSelect]);
        const emailInput = el('input', { id: 'email-input', type: 'email', autocomplete: 'email' });
        const submitButton = el('button', { type: 'submit', class: 'primary-button', text: 'Sign in' });
        const title = el('h1', { text: 'Sign in to TechMock' });
        const toggle = el('button', { type: 'button', class: 'secondary-button', text: "Don't have an account? Register" });

        function syncMode() {
          setVisible(nameRow, isRegistering);
          setVisible(roleRow, isRegistering);
          title.textContent = isRegistering ? 'Create your account' : 'Sign in to TechMock';
          submitButton.textContent = isRegistering ? 'Register' : 'Sign in';
          toggle.textContent = isRegistering ? 'Already have an account? Sign in' : "Don't have an account? Register";
          errorEl.textContent = '';
        }

        toggle.addEventListener('click', () => {
          isRegistering = !isRegistering;
          syncMode();
        });

        async function handleSubmit(event) {
          event.preventDefault();
          errorEl.textContent = '';
          const email = emailInput.value.trim();
          const name = document.getElementById('name-input').value.trim();
          if (isRegistering && (!name || !email)) {
            errorEl.textContent = 'Name and Email are required';
            return;
          }
          if (!email) {
            errorEl.textContent = 'Email is required';
            return;
          }
          try {
            const payload = isRegistering ? { name, email, role: roleSelect.value } : { email };
            currentUser = await api(isRegistering ? '/api/register' : '/api/login', {
              method: 'POST',
              body: JSON.stringify(payload),
            });
            location.hash = currentUser.role === 'admin' ? '#/admin' : '#/dashboard';
          } catch (error) {
            errorEl.textContent = error.message;
          }
        }

        const form = el('form', { onsubmit: handleSubmit }, [
          nameRow,
          el('label', { text: 'Email address', for: 'email-input' }),
          emailInput,
          roleRow,
          errorEl,
          submitButton,
        ]);
        showPage(el('section', { class: 'card' }, [title, form, el('p', {}, [toggle])]));
        syncMode();
      }

      // --- Dashboard ---

      async function renderDashboard() {
        const summary = await api('/api/dashboard');
        const statCard = (label, value) => el('div', { class: 'card' }, [
          el('p', { class: 'muted', text: label }),
          el('p', { class: 'stat-value', text: value }),
        ]);
        const recent = el('section', { class: 'card' }, [el('h2', { text: 'Recent Tests' })]);
        if (summary.recent_results.length === 0) {
          recent.appendChild(el('p', { class: 'muted', text: 'No tests taken yet. Start your first mock test!' }));
        }
        for (const result of summary.recent_results) {
          recent.appendChild(resultRow(result));
        }
        showPage(
          el('section', { class: 'card row' }, [
            el('div', {}, [
              el('h1', { text: `Welcome back, ${currentUser.name}` }),
              el('p', { class: 'muted', text: 'Ready for another practice round?' }),
            ]),
            el('button', { class: 'primary-button', text: 'Start New Test', onclick: () => { location.hash = '#/test'; } }),
          ]),
          el('div', { class: 'stats' }, [
            statCard('Tests Taken', String(summary.tests_taken)),
            statCard('Average Score', `${summary.average_percentage}%`),
            statCard('Best Score', `${summary.best_percentage}%`),
          ]),
          recent,
        );
      }

      function resultRow(result) {
        return el('div', { class: 'list-item row', onclick: () => { location.hash = `#/result/${result.id}`; } }, [
          el('span', { text: formatDate(result.timestamp) }),
          el('span', { text: `${result.score} / ${result.total_questions}` }),
          el('strong', { class: scoreClass(result.percentage), text: `${result.percentage}%` }),
        ]);
      }

      // --- Take Test ---

      async function renderTest() {
        showPage(el('p', { class: 'muted', text: 'Preparing your test…' }));
        try {
          currentAttempt = await api('/api/attempts', { method: 'POST' });
        } catch (error) {
          showPage(el('section', { class: 'card' }, [el('p', { class: 'error', text: error.message })]));
          return;
        }
        attemptAnswers = {};
        const total = currentAttempt.questions.length;
        const progressFill = el('div', { class: 'progress-fill', style: 'width: 0%' });
        const progressLabel = el('span', { class: 'muted', text: `0 of ${total} answered` });
        const submitButton = el('button', { class: 'primary-button', text: 'Submit Test' });

        function refreshProgress() {
          const answered = Object.keys(attemptAnswers).length;
          progressFill.style.width = `${Math.round((answered / total) * 100)}%`;
          progressLabel.textContent = `${answered} of ${total} answered`;
        }

        const cards = currentAttempt.questions.map((question, index) => {
          const optionEls = question.options.map((option, optionIndex) => {
            const optionEl = el('div', { class: 'option' }, [
              el('strong', { text: `${LETTERS[optionIndex]}.` }),
              el('span', { text: option }),
            ]);
            optionEl.addEventListener('click', () => {
              attemptAnswers[question.id] = optionIndex;
              optionEls.forEach(item => item.classList.remove('selected'));
              optionEl.classList.add('selected');
              refreshProgress();
            });
            return optionEl;
          });
          return el('section', { class: 'card' }, [
            el('div', { class: 'row' }, [
              el('span', { class: 'muted', text: `Question ${index + 1}` }),
              el('span', { class: 'tag', text: question.category }),
            ]),
            el('div', { html: question.text_html }),
            ...optionEls,
          ]);
        });

        submitButton.addEventListener('click', async () => {
          const unanswered = total - Object.keys(attemptAnswers).length;
          if (unanswered > 0 && !confirm(`${unanswered} question(s) are unanswered. Submit anyway?`)) {
            return;
          }
          submitButton.disabled = true;
          try {
            const result = await api(`/api/attempts/${encodeURIComponent(currentAttempt.attempt_id)}/submit`, {
              method: 'POST',
              body: JSON.stringify({ answers: attemptAnswers }),
            });
            currentAttempt = null;
            location.hash = `#/result/${result.id}`;
          } catch (error) {
            submitButton.disabled = false;
            alert(error.message);
          }
        });

        showPage(
          el('section', { class: 'card' }, [
            el('div', { class: 'row' }, [el('h1', { text: 'Mock Test' }), progressLabel]),
            el('div', { class: 'progress-track' }, [progressFill]),
          ]),
          ...cards,
          el('div', { class: 'row' }, [el('span'), submitButton]),
        );
      }

      // --- Result Review ---

      async function renderResult(resultId) {
        let review;
        try {
          review = await api(`/api/results/${encodeURIComponent(resultId)}`);
        } catch (error) {
          showPage(el('section', { class: 'card' }, [el('p', { class: 'error', text: error.message })]));
          return;
        }
        const result = review.result;
        const header = el('section', { class: 'card' }, [
          el('h1', { class: scoreClass(result.percentage), text: `You scored ${result.score} / ${result.total_questions}` }),
          el('p', { class: scoreClass(result.percentage), text: result.passed ? 'Great Job! You Passed.' : 'Keep practicing. You can do better!' }),
          el('button', { class: 'secondary-button', text: 'Back to Dashboard', onclick: () => { location.hash = '#/dashboard'; } }),
        ]);
        const items = review.items.map(item => {
          const question = item.question;
          const optionEls = question.options.map((option, optionIndex) => {
            let css = 'option';
            if (optionIndex === question.correct_option_index) css += ' correct';
            else if (optionIndex === item.selected_option_index) css += ' wrong';
            return el('div', { class: css }, [el('strong', { text: `${LETTERS[optionIndex]}.` }), el('span', { text: option })]);
          });
          let answerNote = null;
          if (!item.is_correct) {
            const chosen = item.selected_option_index === null ? 'Not answered' : question.options[item.selected_option_index];
            answerNote = el('p', { class: 'fail', text: `Your Answer: ${chosen}` });
          }
          return el('section', { class: 'card' }, [
            el('span', { class: 'muted', text: `Q${item.position}` }),
            el('div', { html: question.text_html }),
            ...optionEls,
            answerNote,
          ]);
        });
        let missingNote = null;
        if (review.missing_question_ids.length > 0) {
          missingNote = el('p', { class: 'muted', text: `${review.missing_question_ids.length} question(s) from this test are no longer in the question bank.` });
        }
        showPage(header, el('h2', { text: 'Review Answers' }), missingNote, ...items);
      }

      // --- History ---

      async function renderHistory() {
        const history = await api('/api/results');
        const trend = el('div', { class: 'trend' });
        [...history].reverse().forEach(result => {
          trend.appendChild(el('div', { class: 'trend-bar', style: `height: ${result.percentage}%`, title: `${result.percentage}%` }));
        });
        const list = el('section', { class: 'card' }, [el('h2', { text: 'All Attempts' })]);
        if (history.length === 0) {
          list.appendChild(el('p', { class: 'muted', text: 'No attempts recorded yet.' }));
        }
        history.forEach(result => list.appendChild(resultRow(result)));
        showPage(
          el('section', { class: 'card' }, [el('h2', { text: 'Score Trend (%)' }), trend]),
          list,
        );
      }

      // --- Admin ---

      async function renderAdmin() {
        const questions = await api('/api/questions');
        const listCard = el('section', { class: 'card' }, [el('h2', { text: `Question Bank (${questions.length})` })]);
        if (questions.length === 0) {
          listCard.appendChild(el('p', { class: 'muted', text: 'The question bank is empty.' }));
        }
        for (const question of questions) {
          const deleteButton = el('button', { class: 'danger-button', text: 'Delete' });
          deleteButton.addEventListener('click', async () => {
            if (!confirm('Are you sure?')) return;
            await api(`/api/questions/${encodeURIComponent(question.id)}`, { method: 'DELETE' });
            renderAdmin();
          });
          listCard.appendChild(el('div', { class: 'list-item' }, [
            el('div', { class: 'row' }, [el('span', { class: 'tag', text: question.category }), deleteButton]),
            el('div', { html: question.text_html }),
            el('p', { class: 'muted', text: `Answer: ${LETTERS[question.correct_option_index]}. ${question.options[question.correct_option_index]}` }),
          ]));
        }
        showPage(generateCard(), manualAddCard(), listCard);
      }

      function generateCard() {
        const topicInput = el('input', { id: 'topic-input', placeholder: 'e.g. Python generators' });
        const statusEl = el('p', { class: 'muted' });
        const button = el('button', { class: 'primary-button', text: isGenerating ? 'Generating…' : 'Generate' });
        button.disabled = isGenerating;
        button.addEventListener('click', async () => {
          const topic = topicInput.value.trim();
          if (!topic || isGenerating) return;
          isGenerating = true;
          button.disabled = true;
          button.textContent = 'Generating…';
          try {
            const created = await api('/api/questions/generate', {
              method: 'POST',
              body: JSON.stringify({ topic, count: DEFAULT_GENERATION_COUNT }),
            });
            isGenerating = false;
            renderAdmin();
            alert(`Added ${created.length} question(s) about ${topic}.`);
          } catch (error) {
            isGenerating = false;
            button.disabled = false;
            button.textContent = 'Generate';
            statusEl.textContent = error.message;
          }
        });
        return el('section', { class: 'card' }, [
          el('h2', { text: 'AI Question Generator' }),
          el('label', { text: 'Topic', for: 'topic-input' }),
          topicInput,
          statusEl,
          button,
        ]);
      }

      function manualAddCard() {
        const errorEl = el('p', { class: 'error' });
        const textInput = el('textarea', { id: 'question-text-input', rows: '3' });
        const optionInputs = LETTERS.map(letter => el('input', { placeholder: `Option ${letter}` }));
        const correctSelect = el('select', { id: 'correct-input' }, LETTERS.map((letter, index) => el('option', { value: String(index), text: letter })));
        const categoryInput = el('input', { id: 'category-input', placeholder: 'General' });

        async function handleSubmit(event) {
          event.preventDefault();
          const options = optionInputs.map(input => input.value.trim());
          if (!textInput.value.trim() || options.some(option => !option)) {
            errorEl.textContent = 'Question text and all four options are required.';
            return;
          }
          try {
            await api('/api/questions', {
              method: 'POST',
              body: JSON.stringify({
                text: textInput.value,
                options,
                correct_option_index: Number(correctSelect.value),
                category: categoryInput.value,
              }),
            });
            renderAdmin();
          } catch (error) {
            errorEl.textContent = error.message;
          }
        }

        return el('section', { class: 'card' }, [
          el('h2', { text: 'Add Question Manually' }),
          el('form', { onsubmit: handleSubmit }, [
            el('label', { text: 'Question text', for: 'question-text-input' }),
            textInput,
            el('label', { text: 'Options' }),
            ...optionInputs,
            el('label', { text: 'Correct option', for: 'correct-input' }),
            correctSelect,
            el('label', { text: 'Category', for: 'category-input' }),
            categoryInput,
            errorEl,
            el('button', { type: 'submit', class: 'primary-button', text: 'Save Question' }),
          ]),
        ]);
      }

      // --- Routing ---

      async function router() {
        const parts = location.hash.replace(/^#\\/?/, '').split('/');
        const route = parts[0] || '';
        if (!currentUser) {
          updateNav('login');
          if (route !== 'login') {
            location.hash = '#/login';
            return;
          }
          renderLogin();
          return;
        }
        updateNav(route);
        try {
          if (route === 'login' || route === '' || route === 'dashboard') {
            if (currentUser.role === 'admin') {
              location.hash = '#/admin';
              return;
            }
            if (route !== 'dashboard') {
              location.hash = '#/dashboard';
              return;
            }
            await renderDashboard();
          } else if (route === 'test') {
            await renderTest();
          } else if (route === 'result' && parts[1]) {
            await renderResult(decodeURIComponent(parts[1]));
          } else if (route === 'history') {
            await renderHistory();
          } else if (route === 'admin' && currentUser.role === 'admin') {
            await renderAdmin();
          } else {
            location.hash = '#/dashboard';
          }
        } catch (error) {
          if (error.status === 401) {
            currentUser = null;
            location.hash = '#/login';
            return;
          }
          showPage(el('section', { class: 'card' }, [el('p', { class: 'error', text: error.message })]));
        }
      }

      document.getElementById('logout-button').addEventListener('click', async () => {
        await api('/api/logout', { method: 'POST' });
        currentUser = null;
        location.hash = '#/login';
      });

      window.addEventListener('hashchange', router);

      (async function boot() {
        try {
          currentUser = await api('/api/session');
        } catch (error) {
          currentUser = null;
        }
        router();
      })();
    </script>
  </body>
</html>
"""


class RegisterPayload(BaseModel):
    """Payload schema for registration."""

    name: str
    email: str
    role: UserRole = UserRole.STUDENT


class LoginPayload(BaseModel):
    """Payload schema for login by email."""

    email: str


class ManualQuestionPayload(BaseModel):
    """Payload schema for a question typed in by an admin."""

    text: str
    options: list[str]
    correct_option_index: int
    category: str | None = None


class GeneratePayload(BaseModel):
    """Payload schema for AI question generation."""

    topic: str
    count: int = Field(default=DEFAULT_GENERATION_COUNT, ge=1, le=MAX_GENERATION_COUNT)


class SubmitPayload(BaseModel):
    """Payload schema for a finished attempt: question id -> selected option."""

    answers: dict[str, int] = Field(default_factory=dict)


def _render_app_page() -> str:
    return (
        _APP_PAGE_HTML.replace("__PASS_THRESHOLD__", str(PASS_THRESHOLD_PERCENT))
        .replace("__DEFAULT_GENERATION_COUNT__", str(DEFAULT_GENERATION_COUNT))
    )


def _user_payload(user: User) -> dict[str, object]:
    return user.to_dict()


def _question_payload(question: Question, *, include_answer: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "text": question.text,
        "text_html": renderer.render_fragment(question.text),
        "options": list(question.options),
        "category": question.category,
    }
    if include_answer:
        payload["correct_option_index"] = question.correct_option_index
    return payload


def _result_payload(result: TestResult) -> dict[str, object]:
    payload = result.to_dict()
    payload["percentage"] = result.percentage
    payload["passed"] = is_passing(result)
    return payload


def _review_payload(review: ResultReview) -> dict[str, object]:
    return {
        "result": _result_payload(review.result),
        "items": [
            {
                "position": item.position,
                "question": _question_payload(item.question, include_answer=True),
                "selected_option_index": item.selected_option_index,
                "is_correct": item.is_correct,
            }
            for item in review.items
        ],
        "missing_question_ids": list(review.missing_question_ids),
    }


def _get_manager_dependency(manager: MockTestManager):
    def dependency() -> MockTestManager:
        return manager

    return dependency


def browser_session_id(request: Request, response: Response) -> str:
    """Return the browser's session id, issuing a cookie on first contact."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        session_id = secrets.token_urlsafe(24)
        response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return session_id


def create_api_app(manager: MockTestManager) -> FastAPI:
    """Create a FastAPI application wired to the provided manager.

    Each browser holds its own session cookie, so users on different browsers
    never share a sign-in.
    """
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_manager_dependency(manager)
    app_page = _render_app_page()

    def require_user(
        session_id: str = Depends(browser_session_id),
        manager: MockTestManager = Depends(manager_dep),
    ) -> User:
        user = manager.get_session_user(session_id)
        if user is None:
            raise HTTPException(status_code=401, detail="Please sign in first.")
        return user

    def require_admin(user: User = Depends(require_user)) -> User:
        if not user.is_admin:
            raise HTTPException(status_code=403, detail="Admin access required.")
        return user

    @app.get("/", response_class=HTMLResponse)
    def serve_app_page() -> str:
        return app_page

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # --- Identity ---

    @app.get("/api/session")
    def get_session(
        session_id: str = Depends(browser_session_id),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object] | None:
        user = manager.get_session_user(session_id)
        return _user_payload(user) if user is not None else None

    @app.post("/api/register", status_code=201)
    def register(
        payload: RegisterPayload,
        session_id: str = Depends(browser_session_id),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            user = manager.register(payload.name, payload.email, payload.role, session_id=session_id)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _user_payload(user)

    @app.post("/api/login")
    def login(
        payload: LoginPayload,
        session_id: str = Depends(browser_session_id),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            user = manager.login(payload.email, session_id=session_id)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if user is None:
            raise HTTPException(status_code=404, detail="User not found. Please register.")
        return _user_payload(user)

    @app.post("/api/logout", status_code=204)
    def logout(
        session_id: str = Depends(browser_session_id),
        manager: MockTestManager = Depends(manager_dep),
    ) -> None:
        manager.logout(session_id=session_id)

    # --- Question bank (admin) ---

    @app.get("/api/questions")
    def list_questions(
        _: User = Depends(require_admin),
        manager: MockTestManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        return [_question_payload(q, include_answer=True) for q in manager.list_questions()]

    @app.post("/api/questions", status_code=201)
    def add_question(
        payload: ManualQuestionPayload,
        _: User = Depends(require_admin),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            question = manager.add_manual_question(
                payload.text,
                payload.options,
                payload.correct_option_index,
                payload.category,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _question_payload(question, include_answer=True)

    @app.delete("/api/questions/{question_id}", status_code=204)
    def delete_question(
        question_id: str,
        _: User = Depends(require_admin),
        manager: MockTestManager = Depends(manager_dep),
    ) -> None:
        manager.delete_question(question_id)

    @app.post("/api/questions/generate", status_code=201)
    async def generate_questions(
        payload: GeneratePayload,
        _: User = Depends(require_admin),
        manager: MockTestManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        try:
            questions = await manager.generate_questions(payload.topic, payload.count)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return [_question_payload(q, include_answer=True) for q in questions]

    # --- Attempts & results ---

    @app.post("/api/attempts", status_code=201)
    def start_attempt(
        user: User = Depends(require_user),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            attempt = manager.start_attempt(user)
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {
            "attempt_id": attempt.id,
            "started_at": attempt.started_at,
            "questions": [_question_payload(q, include_answer=False) for q in attempt.questions],
        }

    @app.post("/api/attempts/{attempt_id}/submit", status_code=201)
    def submit_attempt(
        attempt_id: str,
        payload: SubmitPayload,
        user: User = Depends(require_user),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            result = manager.submit_attempt(attempt_id, user, payload.answers)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if result is None:
            raise HTTPException(status_code=404, detail="Attempt not found or already submitted.")
        return _result_payload(result)

    @app.get("/api/results")
    def get_history(
        user: User = Depends(require_user),
        manager: MockTestManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        return [_result_payload(r) for r in manager.get_history(user.id)]

    @app.get("/api/results/{result_id}")
    def get_result(
        result_id: str,
        user: User = Depends(require_user),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object]:
        review = manager.review_result(result_id)
        if review is None or (review.result.user_id != user.id and not user.is_admin):
            raise HTTPException(status_code=404, detail="Result not found.")
        return _review_payload(review)

    @app.get("/api/dashboard")
    def get_dashboard(
        user: User = Depends(require_user),
        manager: MockTestManager = Depends(manager_dep),
    ) -> dict[str, object]:
        summary = manager.get_history_summary(user.id)
        return {
            "tests_taken": summary.tests_taken,
            "average_percentage": summary.average_percentage,
            "best_percentage": summary.best_percentage,
            "recent_results": [_result_payload(r) for r in summary.recent_results],
        }

    return app


def start_api_server(
    manager: MockTestManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="TechMockApiServer", daemon=True)
    thread.start()
    return thread
