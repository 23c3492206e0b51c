"""Self-contained HTML page served at ``/``.

Posts the prompt to ``/generate/stream`` and renders the generated HTML as
tokens arrive.
"""

from __future__ import annotations


def get_index_html() -> str:
    """Return the full self-contained HTML page."""
    return _INDEX_HTML


_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>HTML App Generator</title>
<style>
  :root { --fg: #111827; --muted: #6b7280; --border: #d1d5db; --accent: #2563eb; }
  * { box-sizing: border-box; }
  body { margin: 0; font-family: 'Inter', 'Helvetica Neue', Arial, sans-serif; color: var(--fg); background: #f3f4f6; }
  header { padding: 1rem 1.5rem; background: #fff; border-bottom: 1px solid var(--border); }
  header h1 { margin: 0; font-size: 1.25rem; }
  main { display: grid; grid-template-columns: minmax(280px, 1fr) 2fr; gap: 1rem; padding: 1rem 1.5rem; }
  @media (max-width: 800px) { main { grid-template-columns: 1fr; } }
  form { display: flex; flex-direction: column; gap: .75rem; }
  textarea { width: 100%; min-height: 160px; padding: .75rem; border: 1px solid var(--border); border-radius: .5rem; font: inherit; resize: vertical; }
  button { padding: .6rem 1rem; border: 0; border-radius: .5rem; background: var(--accent); color: #fff; font-weight: 600; cursor: pointer; }
  button:disabled { opacity: .5; cursor: default; }
  #status { font-size: .85rem; color: var(--muted); min-height: 1.2em; }
  #preview { background: #fff; border: 1px solid var(--border); border-radius: .5rem; min-height: 70vh; overflow: auto; }
  details pre { white-space: pre-wrap; word-break: break-all; font-size: .75rem; max-height: 240px; overflow: auto; }
</style>
</head>
<body>
<header><h1>HTML App Generator</h1></header>
<main>
  <section>
    <form id="prompt-form">
      <textarea id="prompt" placeholder="Describe the app you want, e.g. a pomodoro timer with a task list"></textarea>
      <button id="submit" type="submit">Generate</button>
      <div id="status"></div>
    </form>
    <details><summary>Source</summary><pre id="source"></pre></details>
  </section>
  <section id="preview"></section>
</main>
<script>
const form = document.getElementById('prompt-form');
const promptBox = document.getElementById('prompt');
const button = document.getElementById('submit');
const statusLine = document.getElementById('status');
const preview = document.getElementById('preview');
const source = document.getElementById('source');

function handleFrame(frame) {
  let name = 'message';
  const data = [];
  for (const line of frame.split('\\n')) {
    if (line.startsWith(':')) continue;
    if (line.startsWith('event: ')) name = line.slice(7);
    else if (line.startsWith('data: ')) data.push(line.slice(6));
  }
  if (!data.length) return '';
  const payload = data.join('\\n');
  if (name === 'token') {
    try { return JSON.parse(payload).text || ''; } catch (e) { return ''; }
  }
  statusLine.textContent = payload;
  return '';
}

function runScripts(root) {
  for (const old of root.querySelectorAll('script')) {
    const s = document.createElement('script');
    s.textContent = old.textContent;
    old.replaceWith(s);
  }
}

form.addEventListener('submit', async (ev) => {
  ev.preventDefault();
  const prompt = promptBox.value.trim();
  if (!prompt) return;
  button.disabled = true;
  preview.innerHTML = '';
  source.textContent = '';
  let html = '';
  try {
    const resp = await fetch('/generate/stream', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ prompt }),
    });
    if (!resp.ok) {
      const body = await resp.json().catch(() => ({}));
      statusLine.textContent = 'Error: ' + (body.error || resp.status);
      return;
    }
    const reader = resp.body.getReader();
    const decoder = new TextDecoder();
    let buf = '';
    for (;;) {
      const { value, done } = await reader.read();
      if (done) break;
      buf += decoder.decode(value, { stream: true });
      let idx;
      while ((idx = buf.indexOf('\\n\\n')) !== -1) {
        const frame = buf.slice(0, idx);
        buf = buf.slice(idx + 2);
        const text = handleFrame(frame);
        if (text) {
          html += text;
          source.textContent = html;
          preview.innerHTML = html;
        }
      }
    }
    runScripts(preview);
  } catch (e) {
    statusLine.textContent = 'Error: ' + e;
  } finally {
    button.disabled = false;
  }
});
</script>
</body>
</html>
"""
