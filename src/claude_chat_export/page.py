"""Page shell for exported conversations: template, stylesheet and viewer script.

The stylesheet targets the class names emitted by blocks.py, markdown.py and
conversation.py; renaming a class there means renaming it here.
"""

CLAUDE_LOGO = (
    '<svg width="20" height="20" viewBox="0 0 24 24" fill="currentColor">'
    '<path d="M16.1 2.96l-4.6 8-1.86-3.22L12.96 2.2a.78.78 0 0 1 1.36 0l1.78 .76z'
    'M17.9 17.04l-4.6-8 1.86-3.22 5.32 9.22a.78.78 0 0 1-.68 1.17l-1.9-.17z'
    'M6.1 17.04l4.6-8-1.86 3.22-5.32-9.22a.78.78 0 0 1 .68-1.17l1.9 .17z'
    'M12 22a2 2 0 1 0 0-4 2 2 0 0 0 0 4z"/></svg>'
)

THEMES = ("light", "dark")

STYLESHEET = """\
:root {
  --bg-primary: #f5f4ef;
  --bg-secondary: #eae8e1;
  --bg-message-human: #e8e5db;
  --text-primary: #1a1a1a;
  --text-secondary: #6b6560;
  --text-muted: #9a948e;
  --accent: #c96442;
  --border: #d8d4cc;
  --code-bg: #2b2926;
  --code-text: #e8e4da;
  --thinking-bg: #edeadf;
  --tool-bg: #f0ede4;
  --artifact-bg: #faf9f5;
  --card-bg: #fff;
  --error: #c0392b;
  --radius: 8px;
  --radius-sm: 4px;
}
[data-theme="dark"] {
  --bg-primary: #1a1916;
  --bg-secondary: #232220;
  --bg-message-human: #2a2824;
  --text-primary: #e8e4da;
  --text-secondary: #a09890;
  --text-muted: #706860;
  --accent: #d4805e;
  --border: #3a3632;
  --code-bg: #111110;
  --code-text: #d4d0c5;
  --thinking-bg: #222120;
  --tool-bg: #252320;
  --artifact-bg: #1e1d1a;
  --card-bg: #252320;
  --error: #e05252;
}
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
  background: var(--bg-primary);
  color: var(--text-primary);
  line-height: 1.6;
  font-size: 15px;
}
.page-header {
  position: sticky; top: 0; z-index: 100;
  background: var(--bg-primary);
  border-bottom: 1px solid var(--border);
  padding: 12px 24px;
  display: flex; align-items: center; justify-content: space-between;
}
.header-left { display: flex; align-items: center; gap: 12px; }
.claude-logo-header { color: var(--accent); display: flex; }
.header-title h1 { font-size: 16px; font-weight: 600; }
.header-meta { font-size: 12px; color: var(--text-muted); }
.header-actions { display: flex; gap: 8px; }
.header-actions button {
  background: none; border: 1px solid var(--border); border-radius: var(--radius-sm);
  padding: 6px 8px; cursor: pointer; color: var(--text-secondary);
}
.conversation { max-width: 48rem; margin: 0 auto; padding: 24px 16px 80px; }
.message { display: flex; gap: 16px; padding: 24px 0; }
.message + .message { border-top: 1px solid var(--border); }
.message-avatar {
  width: 28px; height: 28px; min-width: 28px; border-radius: 50%;
  display: flex; align-items: center; justify-content: center;
  font-size: 13px; font-weight: 600;
}
.human-avatar { background: var(--text-primary); color: var(--bg-primary); }
.assistant-avatar { color: var(--accent); }
.message-body { flex: 1; min-width: 0; }
.message-sender { font-weight: 600; font-size: 14px; margin-bottom: 4px; }
.message-human .message-content {
  background: var(--bg-message-human); border-radius: var(--radius); padding: 12px 16px;
}
.message-content p { margin: 0 0 12px; }
.message-content h1, .message-content h2, .message-content h3,
.message-content h4, .message-content h5, .message-content h6 { margin: 16px 0 8px; }
.message-content ul, .message-content ol { margin: 0 0 12px 24px; }
.message-content blockquote {
  border-left: 3px solid var(--border); padding-left: 12px; color: var(--text-secondary);
}
.message-content hr { border: none; border-top: 1px solid var(--border); margin: 16px 0; }
.message-content table { border-collapse: collapse; margin: 0 0 12px; }
.message-content th, .message-content td { border: 1px solid var(--border); padding: 4px 10px; }
.message-content a { color: var(--accent); }
.inline-code {
  font-family: "SF Mono", "Fira Code", monospace; font-size: 0.88em;
  background: var(--bg-secondary); padding: 1px 5px; border-radius: var(--radius-sm);
}
.code-block {
  position: relative; background: var(--code-bg); color: var(--code-text);
  border-radius: var(--radius); padding: 14px 16px; margin: 0 0 12px;
  overflow-x: auto; font-family: "SF Mono", "Fira Code", monospace; font-size: 13px;
}
.copy-btn {
  position: absolute; top: 6px; right: 6px; font-size: 11px; cursor: pointer;
  background: rgba(255,255,255,0.1); color: var(--code-text); border: none;
  border-radius: var(--radius-sm); padding: 2px 8px;
}
.hl-comment { color: #8a8578; font-style: italic; }
.hl-string { color: #a5c261; }
.hl-number { color: #d19a66; }
.hl-keyword { color: #cc7832; font-weight: 600; }
.thinking-block, .redacted-thinking {
  background: var(--thinking-bg); border-radius: var(--radius);
  margin: 0 0 12px; padding: 8px 12px; font-size: 14px; color: var(--text-secondary);
}
.thinking-block summary { cursor: pointer; display: flex; align-items: center; gap: 6px; }
.thinking-content { margin-top: 8px; }
.tool-block {
  background: var(--tool-bg); border: 1px solid var(--border);
  border-radius: var(--radius); margin: 0 0 12px; padding: 8px 12px; font-size: 14px;
}
.tool-header { display: flex; align-items: center; gap: 6px; color: var(--text-secondary); }
.tool-input-details summary { cursor: pointer; font-size: 12px; color: var(--text-muted); }
.tool-input { font-size: 12px; white-space: pre-wrap; word-break: break-word; }
.tool-result { margin: 0 0 12px; font-size: 14px; }
.tool-error { color: var(--error); }
.artifact-block {
  background: var(--artifact-bg); border: 1px solid var(--border);
  border-radius: var(--radius); margin: 0 0 12px; overflow: hidden;
}
.artifact-header { display: flex; align-items: center; gap: 8px; padding: 8px 12px; }
.artifact-title { font-weight: 600; }
.artifact-lang { font-size: 12px; color: var(--text-muted); }
.artifact-tabs { display: flex; gap: 4px; padding: 0 12px 8px; }
.artifact-tab {
  background: none; border: 1px solid var(--border); border-radius: var(--radius-sm);
  padding: 2px 10px; cursor: pointer; color: var(--text-secondary);
}
.artifact-tab.active { background: var(--bg-secondary); color: var(--text-primary); }
.artifact-content .code-block { margin: 0; border-radius: 0; }
.artifact-preview-view iframe { width: 100%; height: 420px; border: none; background: #fff; }
.search-results-block { margin: 0 0 12px; font-size: 14px; }
.search-results-header { color: var(--text-secondary); cursor: pointer; }
.search-results-list { display: flex; flex-direction: column; gap: 6px; margin-top: 6px; }
.search-result-card {
  display: block; text-decoration: none; color: inherit;
  background: var(--card-bg); border: 1px solid var(--border);
  border-radius: var(--radius-sm); padding: 6px 10px;
}
.result-title { font-weight: 500; }
.result-url, .result-age { font-size: 12px; color: var(--text-muted); }
.result-favicon { vertical-align: middle; }
.knowledge-ref { font-size: 14px; color: var(--text-secondary); }
.code-exec-result { margin: 0 0 12px; }
.exec-label { font-size: 12px; color: var(--text-muted); text-transform: uppercase; }
.code-exec-result pre {
  background: var(--code-bg); color: var(--code-text); padding: 8px 12px;
  border-radius: var(--radius-sm); overflow-x: auto; font-size: 13px;
}
.exec-error pre { color: var(--error); }
.message-image { max-width: 100%; border-radius: var(--radius); margin: 0 0 12px; }
.unknown-block { color: var(--text-muted); font-style: italic; font-size: 13px; }
.uploaded-files-grid { display: flex; flex-wrap: wrap; gap: 8px; margin-bottom: 8px; }
.uploaded-file {
  border: 1px solid var(--border); border-radius: var(--radius);
  padding: 6px 10px; display: flex; align-items: center; gap: 6px; font-size: 13px;
}
.uploaded-image { flex-direction: column; padding: 4px; }
.uploaded-image img { max-width: 220px; max-height: 220px; border-radius: var(--radius-sm); cursor: zoom-in; }
.uploaded-image img.expanded {
  position: fixed; top: 50%; left: 50%; transform: translate(-50%, -50%);
  max-width: 92vw; max-height: 92vh; z-index: 1001; cursor: zoom-out;
}
.image-overlay { position: fixed; inset: 0; background: rgba(0,0,0,0.7); z-index: 1000; }
.uploaded-doc { flex-direction: column; align-items: flex-start; }
.doc-thumbnail { max-width: 160px; border-radius: var(--radius-sm); }
.uploaded-file-info { display: flex; align-items: center; gap: 6px; }
.text-attachment, .attachment {
  border: 1px solid var(--border); border-radius: var(--radius);
  padding: 6px 10px; margin-bottom: 8px; font-size: 13px;
}
.text-attachment summary { cursor: pointer; }
.text-attachment-content pre {
  white-space: pre-wrap; word-break: break-word; font-size: 12px;
  max-height: 360px; overflow-y: auto; margin-top: 6px;
}
.att-size { color: var(--text-muted); }
"""

VIEWER_SCRIPT = """\
(function() {
  var root = document.documentElement;
  var saved = localStorage.getItem('claude-export-theme');
  if (saved) root.setAttribute('data-theme', saved);

  document.getElementById('theme-toggle').addEventListener('click', function() {
    var next = root.getAttribute('data-theme') === 'dark' ? 'light' : 'dark';
    root.setAttribute('data-theme', next);
    localStorage.setItem('claude-export-theme', next);
  });

  var expanded = false;
  document.getElementById('expand-all-btn').addEventListener('click', function() {
    expanded = !expanded;
    document.querySelectorAll('.thinking-block').forEach(function(d) { d.open = expanded; });
  });

  document.querySelectorAll('.code-block').forEach(function(block) {
    var btn = document.createElement('button');
    btn.className = 'copy-btn';
    btn.textContent = 'Copy';
    btn.addEventListener('click', function() {
      navigator.clipboard.writeText(block.querySelector('code').textContent).then(function() {
        btn.textContent = 'Copied!';
        setTimeout(function() { btn.textContent = 'Copy'; }, 1500);
      });
    });
    block.appendChild(btn);
  });

  document.querySelectorAll('.uploaded-image img').forEach(function(img) {
    img.addEventListener('click', function() {
      var overlay = document.querySelector('.image-overlay');
      if (img.classList.contains('expanded')) {
        img.classList.remove('expanded');
        if (overlay) overlay.remove();
        return;
      }
      overlay = document.createElement('div');
      overlay.className = 'image-overlay';
      overlay.addEventListener('click', function() {
        img.classList.remove('expanded');
        overlay.remove();
      });
      document.body.appendChild(overlay);
      img.classList.add('expanded');
    });
  });

  document.querySelectorAll('.artifact-tabs').forEach(function(tabs) {
    var artifact = tabs.closest('.artifact-block');
    tabs.querySelectorAll('.artifact-tab').forEach(function(tab) {
      tab.addEventListener('click', function() {
        tabs.querySelectorAll('.artifact-tab').forEach(function(t) { t.classList.remove('active'); });
        tab.classList.add('active');
        var showPreview = tab.dataset.tab === 'preview';
        var preview = artifact.querySelector('.artifact-preview-view');
        artifact.querySelector('.artifact-code-view').style.display = showPreview ? 'none' : '';
        if (preview) preview.style.display = showPreview ? '' : 'none';
      });
    });
  });
})();
"""

HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en" data-theme="{theme}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
{css}</style>
</head>
<body>
<header class="page-header">
<div class="header-left">
<div class="claude-logo-header">{logo}</div>
<div class="header-title">
<h1>{title}</h1>
<div class="header-meta">{meta}</div>
</div>
</div>
<div class="header-actions">
<button id="expand-all-btn" title="Expand/collapse all thinking">Thinking</button>
<button id="theme-toggle" title="Toggle dark/light mode">Theme</button>
</div>
</header>
<main class="conversation">
{body}
</main>
<script>
{script}</script>
</body>
</html>
"""
