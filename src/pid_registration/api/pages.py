"""HTML pages served by the application."""

import html
import json
from string import Template

from fastapi import Request
from fastapi.responses import HTMLResponse

from pid_registration import messages
from pid_registration.adapters.cookie_store import CookieKeyValueStore
from pid_registration.config import Settings
from pid_registration.services.storage import current_theme


def render_page(template: Template, **values: object) -> HTMLResponse:
    """Fill a page template; values must already be escaped for their slot."""
    return HTMLResponse(template.substitute(**values))


def html_value(value: str) -> str:
    return html.escape(value, quote=True)


def js_value(value: object) -> str:
    return json.dumps(value).replace("</", "<\\/")


def js_messages() -> str:
    """Notice texts used by page scripts."""
    return js_value(
        {
            "nameTooShort": messages.NAME_TOO_SHORT,
            "phoneInvalid": messages.PHONE_INVALID,
            "registrationFailure": messages.registration_failure(None),
            "loginFailure": messages.LOGIN_FAILURE,
            "logoutFailure": messages.LOGOUT_FAILURE,
            "sessionExpired": messages.SESSION_EXPIRED,
            "refreshFailure": messages.REFRESH_FAILURE,
            "deleteConfirm": messages.DELETE_CONFIRM,
            "copySuccess": messages.COPY_SUCCESS,
            "copyFailure": messages.COPY_FAILURE,
            "loading": messages.LOADING_PLACEHOLDER,
            "empty": messages.EMPTY_PLACEHOLDER,
        }
    )


def page_values(request: Request, settings: Settings, **extra: str) -> dict[str, str]:
    """Template values shared by every page."""
    store = CookieKeyValueStore.from_request(request)
    return {
        "theme": current_theme(store),
        "notice_ms": js_value(settings.notice_duration_seconds * 1000),
        "messages": js_messages(),
        **extra,
    }


_HEAD = r"""<!doctype html>
<html lang="pt-BR" class="$theme">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Programa de Inclusão Digital</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0; }
      html.dark body { background: #111827; color: #f3f4f6; }
      html.light body { background: #ffffff; color: #111827; }
      main { max-width: 28rem; margin: 0 auto; padding: 3rem 1rem; }
      main.wide { max-width: 72rem; }
      label { display: block; margin-top: 1rem; font-size: 0.9rem; }
      input { width: 100%; padding: 0.5rem; box-sizing: border-box; }
      input.invalid { border: 1px solid #ef4444; }
      .field-error { color: #f87171; font-size: 0.85rem; margin: 0.3rem 0 0; }
      button { padding: 0.5rem 1rem; margin-top: 1rem; cursor: pointer; }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      table { width: 100%; border-collapse: collapse; }
      th, td { text-align: left; padding: 0.6rem; border-bottom: 1px solid #374151; }
      .toast { position: fixed; top: 1rem; right: 1rem; padding: 0.8rem 1.4rem;
               border-radius: 0.4rem; color: #fff; z-index: 50; }
      .toast.success { background: #22c55e; }
      .toast.error { background: #dc2626; }
      .theme-toggle { position: fixed; top: 1rem; left: 1rem; margin: 0; }
    </style>
  </head>
"""

_TOAST_SCRIPT = r"""
    <script>
      const NOTICE_MS = $notice_ms;
      const MESSAGES = $messages;
      function showToast(message, kind) {
        const toast = document.createElement('div');
        toast.className = 'toast ' + kind;
        toast.textContent = message;
        document.body.appendChild(toast);
        setTimeout(function () { toast.remove(); }, NOTICE_MS);
      }
      async function toggleTheme() {
        const res = await fetch('/tema', { method: 'POST' });
        if (res.ok) {
          const data = await res.json();
          document.documentElement.className = data.theme;
        }
      }
    </script>
"""

REGISTRATION_PAGE = Template(
    _HEAD
    + r"""  <body>
    <button class="theme-toggle" type="button" onclick="toggleTheme()"
            aria-label="Alternar tema">Tema</button>
    <main>
      <h1>Programa de Inclusão Digital</h1>
      <p>Preencha o formulário abaixo para se inscrever no programa</p>
      <form id="registration" novalidate>
        <label for="name">Nome Completo</label>
        <input id="name" name="name" type="text" required />
        <p class="field-error" id="name-error" hidden></p>
        <label for="phone">Telefone</label>
        <input id="phone" name="phone" type="tel" placeholder="(99) 99999-9999"
               required />
        <p class="field-error" id="phone-error" hidden></p>
        <button id="submit" type="submit">Realizar Inscrição</button>
        <button type="button" onclick="window.location.href='/admin/login'">
          Login Administrativo
        </button>
      </form>
    </main>
"""
    + _TOAST_SCRIPT
    + r"""    <script>
      const form = document.getElementById('registration');
      const submitButton = document.getElementById('submit');
      const inputs = {
        name: document.getElementById('name'),
        phone: document.getElementById('phone')
      };
      const errors = {};

      function formatPhone(value) {
        const digits = value.replace(/\D/g, '');
        if (digits.length > 11) {
          return value;
        }
        const match = digits.match(/^(\d{2})?(\d{5})?(\d{4})?/);
        let formatted = '';
        if (match[1]) formatted += '(' + match[1];
        if (match[2]) formatted += ') ' + match[2];
        if (match[3]) formatted += '-' + match[3];
        return formatted + digits.slice(match[0].length);
      }

      function validate(field, value) {
        if (field === 'name') {
          return value.trim().length < 3 ? MESSAGES.nameTooShort : null;
        }
        return /^\(\d{2}\) \d{5}-\d{4}$$/.test(value) ? null : MESSAGES.phoneInvalid;
      }

      function showError(field, message) {
        const node = document.getElementById(field + '-error');
        if (message) {
          errors[field] = message;
          node.textContent = message;
          node.hidden = false;
          inputs[field].classList.add('invalid');
        } else {
          delete errors[field];
          node.textContent = '';
          node.hidden = true;
          inputs[field].classList.remove('invalid');
        }
        submitButton.disabled = Object.keys(errors).length > 0;
      }

      Object.keys(inputs).forEach(function (field) {
        inputs[field].addEventListener('input', function (event) {
          if (field === 'phone') {
            event.target.value = formatPhone(event.target.value);
          }
          showError(field, validate(field, event.target.value));
        });
      });

      form.addEventListener('submit', async function (event) {
        event.preventDefault();
        Object.keys(inputs).forEach(function (field) {
          showError(field, validate(field, inputs[field].value));
        });
        if (Object.keys(errors).length > 0) {
          return;
        }
        submitButton.disabled = true;
        submitButton.textContent = 'Enviando...';
        try {
          const res = await fetch('/api/inscricoes', {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({
              name: inputs.name.value,
              phone: inputs.phone.value
            })
          });
          const data = await res.json();
          if (res.status === 422) {
            Object.keys(data.errors).forEach(function (field) {
              showError(field, data.errors[field]);
            });
            return;
          }
          if (!res.ok) {
            showToast(data.message, 'error');
            return;
          }
          form.reset();
          showToast(data.message, 'success');
          setTimeout(function () {
            window.location.href = data.redirect;
          }, data.redirect_delay_ms);
        } catch (err) {
          showToast(MESSAGES.registrationFailure, 'error');
        } finally {
          submitButton.textContent = 'Realizar Inscrição';
          submitButton.disabled = Object.keys(errors).length > 0;
        }
      });
    </script>
  </body>
</html>
"""
)

GROUP_PAGE = Template(
    _HEAD
    + r"""  <body>
    <button class="theme-toggle" type="button" onclick="toggleTheme()"
            aria-label="Alternar tema">Tema</button>
    <main>
      <h1>Bem-vindo ao PID!</h1>
      <a href="$group_url" target="_blank" rel="noopener noreferrer">
        Entrar no Grupo do WhatsApp
      </a>
    </main>
"""
    + _TOAST_SCRIPT
    + r"""  </body>
</html>
"""
)

LOGIN_PAGE = Template(
    _HEAD
    + r"""  <body>
    <main>
      <h1>Acesso Administrativo</h1>
      <form id="login">
        <label for="email">Email</label>
        <input id="email" name="email" type="email" autocomplete="email" required />
        <label for="password">Senha</label>
        <input id="password" name="password" type="password"
               autocomplete="current-password" required />
        <button id="submit" type="submit">Entrar</button>
      </form>
    </main>
"""
    + _TOAST_SCRIPT
    + r"""    <script>
      if ($session_expired) {
        alert(MESSAGES.sessionExpired);
      }
      const loginForm = document.getElementById('login');
      const loginButton = document.getElementById('submit');
      loginForm.addEventListener('submit', async function (event) {
        event.preventDefault();
        loginButton.disabled = true;
        loginButton.textContent = 'Entrando...';
        try {
          const res = await fetch('/admin/api/login', {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({
              email: document.getElementById('email').value,
              password: document.getElementById('password').value
            })
          });
          const data = await res.json();
          if (!res.ok) {
            showToast(data.message, 'error');
            return;
          }
          showToast(data.message, 'success');
          window.location.href = data.redirect;
        } catch (err) {
          showToast(MESSAGES.loginFailure, 'error');
        } finally {
          loginButton.disabled = false;
          loginButton.textContent = 'Entrar';
        }
      });
    </script>
  </body>
</html>
"""
)

DASHBOARD_PAGE = Template(
    _HEAD
    + r"""  <body>
    <main class="wide">
      <h1>Painel Administrativo</h1>
      <button id="refresh" type="button">Atualizar</button>
      <button id="logout" type="button">Sair</button>
      <table>
        <thead>
          <tr><th>Nome</th><th>Telefone</th><th>Data de Inscrição</th><th>Ações</th></tr>
        </thead>
        <tbody id="rows">
          <tr><td colspan="4">$loading</td></tr>
        </tbody>
      </table>
    </main>
"""
    + _TOAST_SCRIPT
    + r"""    <script>
      const CHECK_INTERVAL_MS = $check_interval_ms;
      const controller = new AbortController();
      const rows = document.getElementById('rows');
      const refreshButton = document.getElementById('refresh');
      let loaded = false;

      function cell(text) {
        const td = document.createElement('td');
        td.textContent = text;
        return td;
      }

      function button(label, onClick) {
        const node = document.createElement('button');
        node.type = 'button';
        node.textContent = label;
        node.addEventListener('click', onClick);
        return node;
      }

      function placeholderRow(text) {
        const tr = document.createElement('tr');
        const td = cell(text);
        td.colSpan = 4;
        tr.appendChild(td);
        return tr;
      }

      function render(data) {
        rows.replaceChildren();
        if (data.placeholder) {
          rows.appendChild(placeholderRow(data.placeholder));
          return;
        }
        data.registrations.forEach(function (registration) {
          const tr = document.createElement('tr');
          tr.appendChild(cell(registration.name));
          tr.appendChild(cell(registration.phone));
          tr.appendChild(cell(registration.created_at_display));
          const actions = document.createElement('td');
          actions.appendChild(button('Copiar', function () {
            copyText(registration.clipboard_text);
          }));
          actions.appendChild(button('Editar', function () {
            edit(tr, registration);
          }));
          actions.appendChild(button('Excluir', function () {
            remove(registration);
          }));
          tr.appendChild(actions);
          rows.appendChild(tr);
        });
      }

      async function call(method, path, body) {
        const options = { method: method, signal: controller.signal };
        if (body) {
          options.headers = { 'Content-Type': 'application/json' };
          options.body = JSON.stringify(body);
        }
        const res = await fetch(path, options);
        if (res.status === 401) {
          const data = await res.json();
          if (data.detail === 'session_expired') {
            alert(MESSAGES.sessionExpired);
          }
          window.location.href = '/admin/login';
          return null;
        }
        return { ok: res.ok, data: await res.json() };
      }

      async function load() {
        refreshButton.disabled = true;
        refreshButton.textContent = 'Atualizando...';
        try {
          const result = await call('GET', '/admin/api/registrations');
          if (!result) return;
          if (!result.ok) {
            showToast(result.data.message, 'error');
            if (!loaded) render({ registrations: [], placeholder: MESSAGES.empty });
            return;
          }
          loaded = true;
          render(result.data);
          showToast(result.data.message, 'success');
        } catch (err) {
          if (err.name !== 'AbortError') showToast(MESSAGES.refreshFailure, 'error');
        } finally {
          refreshButton.disabled = false;
          refreshButton.textContent = 'Atualizar';
        }
      }

      async function mutate(method, path, body) {
        try {
          const result = await call(method, path, body);
          if (!result) return;
          if (!result.ok) {
            const errors = result.data.errors;
            const text = errors ? Object.values(errors).join(' ') : result.data.message;
            showToast(text, 'error');
            return;
          }
          render(result.data);
          showToast(result.data.message, 'success');
        } catch (err) {
          if (err.name !== 'AbortError') showToast(MESSAGES.refreshFailure, 'error');
        }
      }

      function edit(tr, registration) {
        tr.replaceChildren();
        const name = document.createElement('input');
        name.value = registration.name;
        const phone = document.createElement('input');
        phone.value = registration.phone;
        const nameCell = document.createElement('td');
        nameCell.appendChild(name);
        const phoneCell = document.createElement('td');
        phoneCell.appendChild(phone);
        const actions = document.createElement('td');
        actions.appendChild(button('Salvar', function () {
          mutate('PUT', '/admin/api/registrations/' + encodeURIComponent(registration.id), {
            name: name.value,
            phone: phone.value
          });
        }));
        actions.appendChild(button('Cancelar', load));
        tr.appendChild(nameCell);
        tr.appendChild(phoneCell);
        tr.appendChild(cell(registration.created_at_display));
        tr.appendChild(actions);
      }

      function remove(registration) {
        if (!confirm(MESSAGES.deleteConfirm)) {
          return;
        }
        mutate('DELETE', '/admin/api/registrations/' + encodeURIComponent(registration.id) + '?confirmed=true');
      }

      function copyText(text) {
        navigator.clipboard.writeText(text)
          .then(function () { showToast(MESSAGES.copySuccess, 'success'); })
          .catch(function () { showToast(MESSAGES.copyFailure, 'error'); });
      }

      async function logout() {
        try {
          const res = await fetch('/admin/api/logout', { method: 'POST' });
          const data = await res.json();
          if (!res.ok) {
            showToast(data.message, 'error');
            return;
          }
          showToast(data.message, 'success');
          window.location.href = data.redirect;
        } catch (err) {
          showToast(MESSAGES.logoutFailure, 'error');
        }
      }

      const sessionCheck = setInterval(function () {
        call('GET', '/admin/api/session').catch(function () {});
      }, CHECK_INTERVAL_MS);

      window.addEventListener('pagehide', function () {
        clearInterval(sessionCheck);
        controller.abort();
      });
      refreshButton.addEventListener('click', load);
      document.getElementById('logout').addEventListener('click', logout);
      load();
    </script>
  </body>
</html>
"""
)
