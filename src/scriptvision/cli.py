# -*- coding: utf-8 -*-
"""
scriptvision/cli.py

目的：
- 命令行入口。
- init / set-script      ：建项目目录、写剧本
- run                    ：走 pipeline/orchestrator（script -> shot_list -> subjects -> prompts，支持 --until）
- suggest / review / accept：建议镜头 -> 勾选 -> 并入分镜表
- merge-subjects         ：提议主体并入 canonical（同名丢弃）
- import                 ：从文件导入分镜（JSON 数组或自由文本）
- parse                  ：离线解析一段模型回复，调试解析链路用，不碰项目
- style / shot / subject ：风格、分镜、主体的手动增删改
- prompts                ：用选中的风格给镜头生成三档视觉 prompt

注意：
- CLI 不做业务细节，只负责参数解析 + 调用 core / skills / orchestrator + 打印结果。
- ScriptVisionError / ValueError 在 main() 里统一打印 [ERROR] 并以非 0 退出。
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from scriptvision.core.errors import ScriptVisionError
from scriptvision.core.io import project_paths
from scriptvision.core.project import load_project, new_project, save_project
from scriptvision.logging_config import get_logger, setup_logging


log = get_logger(__name__)

STAGES = [
	"script",
	"shot_list",
	"subjects",
	"prompts",
]


def build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(
		prog="scriptvision",
		description="Script -> shot list / subjects, with AI suggestions and review",
	)
	p.add_argument("--log_level", default="INFO", help="DEBUG / INFO / WARNING / ERROR")

	sub = p.add_subparsers(dest="cmd", required=True)

	initp = sub.add_parser("init", help="Create a project directory with an empty project.json")
	initp.add_argument("--project_dir", required=True, help="e.g. output/my_film")
	initp.add_argument("--name", default="Untitled Project")

	scriptp = sub.add_parser("set-script", help="Store the script text in the project")
	scriptp.add_argument("--project_dir", required=True)
	src = scriptp.add_mutually_exclusive_group(required=True)
	src.add_argument("--file", help="script text file (utf-8)")
	src.add_argument("--text", help="script text inline")

	runp = sub.add_parser("run", help="Run pipeline stages for an existing project")
	runp.add_argument("--project_dir", required=True)
	runp.add_argument("--until", default="subjects", choices=STAGES)
	runp.add_argument("--mock", action="store_true", help="use canned LLM responses (offline)")

	sugp = sub.add_parser("suggest", help="Ask the LLM for additional shots; results go to review")
	sugp.add_argument("--project_dir", required=True)
	sugp.add_argument("--mock", action="store_true")

	revp = sub.add_parser("review", help="Show pending suggestions; optionally change selection")
	revp.add_argument("--project_dir", required=True)
	revp.add_argument("--toggle", type=int, nargs="*", default=[], help="indexes to toggle")
	sel = revp.add_mutually_exclusive_group()
	sel.add_argument("--all", action="store_true", help="select all")
	sel.add_argument("--none", action="store_true", help="deselect all")

	accp = sub.add_parser("accept", help="Merge selected suggestions into the shot list")
	accp.add_argument("--project_dir", required=True)
	pick = accp.add_mutually_exclusive_group()
	pick.add_argument("--all", action="store_true", help="accept every suggestion")
	pick.add_argument("--index", type=int, nargs="+", help="select these indexes, then accept")

	mergep = sub.add_parser("merge-subjects", help="Merge proposed subjects into the subject list")
	mergep.add_argument("--project_dir", required=True)

	impp = sub.add_parser("import", help="Import shots from a JSON array or free text")
	impp.add_argument("--project_dir", required=True)
	impp.add_argument("--file", required=True)

	parsep = sub.add_parser("parse", help="Parse a saved LLM reply offline and print the records")
	parsep.add_argument("--file", required=True)
	parsep.add_argument("--kind", default="shots", choices=["shots", "subjects"])

	stylep = sub.add_parser("style", help="Manage visual styles")
	style_sub = stylep.add_subparsers(dest="style_cmd", required=True)
	sadd = style_sub.add_parser("add", help="Add a style")
	sadd.add_argument("--project_dir", required=True)
	sadd.add_argument("--name", required=True)
	sadd.add_argument("--prefix", default="")
	sadd.add_argument("--suffix", default="")
	sadd.add_argument("--genre", default="")
	sadd.add_argument("--descriptors", default="")
	sadd.add_argument("--select", action="store_true", help="also select the new style")
	slist = style_sub.add_parser("list", help="List styles; * marks the selected one")
	slist.add_argument("--project_dir", required=True)
	ssel = style_sub.add_parser("select", help="Select the style used for prompts")
	ssel.add_argument("--project_dir", required=True)
	ssel.add_argument("--id", required=True)
	sdel = style_sub.add_parser("delete", help="Delete a style")
	sdel.add_argument("--project_dir", required=True)
	sdel.add_argument("--id", required=True)

	shotp = sub.add_parser("shot", help="List / edit / delete shots")
	shot_sub = shotp.add_subparsers(dest="shot_cmd", required=True)
	shlist = shot_sub.add_parser("list", help="List shots with their ids")
	shlist.add_argument("--project_dir", required=True)
	shedit = shot_sub.add_parser("edit", help="Change fields of one shot")
	shedit.add_argument("--project_dir", required=True)
	shedit.add_argument("--id", required=True)
	shedit.add_argument("--set", nargs="+", required=True, metavar="FIELD=VALUE", help="e.g. shot_size=CU location=Rooftop")
	shdel = shot_sub.add_parser("delete", help="Delete one shot")
	shdel.add_argument("--project_dir", required=True)
	shdel.add_argument("--id", required=True)

	subjp = sub.add_parser("subject", help="List / add / delete / toggle subjects")
	subj_sub = subjp.add_subparsers(dest="subject_cmd", required=True)
	sjlist = subj_sub.add_parser("list", help="List subjects and proposed subjects")
	sjlist.add_argument("--project_dir", required=True)
	sjadd = subj_sub.add_parser("add", help="Add a subject by hand")
	sjadd.add_argument("--project_dir", required=True)
	sjadd.add_argument("--name", required=True)
	sjadd.add_argument("--category", default="People", choices=["People", "Places", "Props"])
	sjadd.add_argument("--description", default="")
	sjadd.add_argument("--alias", default="")
	sjdel = subj_sub.add_parser("delete", help="Delete a subject (canonical or proposed)")
	sjdel.add_argument("--project_dir", required=True)
	sjdel.add_argument("--id", required=True)
	sjtog = subj_sub.add_parser("toggle", help="Flip a subject between active and inactive")
	sjtog.add_argument("--project_dir", required=True)
	sjtog.add_argument("--id", required=True)

	promptp = sub.add_parser("prompts", help="Generate visual prompts with the selected style")
	promptp.add_argument("--project_dir", required=True)
	promptp.add_argument("--shot_id", default="", help="only (re)generate this shot")
	promptp.add_argument("--mock", action="store_true")
	promptp.add_argument("--camera_shot", default="")
	promptp.add_argument("--move", default="")
	promptp.add_argument("--framing", default="")
	promptp.add_argument("--dof", default="", help="depth of field, e.g. Shallow")
	promptp.add_argument("--camera_type", default="")
	promptp.add_argument("--camera_name", default="")

	return p


def _load(project_dir: str):
	paths = project_paths(project_dir)
	if not paths.project.exists():
		raise FileNotFoundError(f"missing {paths.project} (run `scriptvision init` first)")
	return paths, load_project(paths.project)


def _print_suggestions(project) -> None:
	batch = project.suggested_shots
	if not len(batch):
		print("[INFO] no pending suggestions")
		return
	for i, s in enumerate(batch.items):
		mark = "x" if batch.is_selected(i) else " "
		print(f"[{mark}] {i}: Scene {s.scene}, Shot {s.shot} ({s.shot_size}) {s.description}")
		if s.reason:
			print(f"        reason: {s.reason}")


def cmd_init(project_dir: str, name: str) -> None:
	paths = project_paths(project_dir)
	paths.ensure_dirs()

	if paths.project.exists():
		print(f"[INFO] project already exists: {paths.project}")
		return

	save_project(paths.project, new_project(name))
	print(f"[OK] project created: {paths.root}")


def cmd_set_script(project_dir: str, file: Optional[str], text: Optional[str]) -> None:
	paths, p = _load(project_dir)
	script = Path(file).read_text(encoding="utf-8") if file else (text or "")

	p.set_script(script)
	save_project(paths.project, p)
	paths.script_txt.write_text(p.script, encoding="utf-8")
	print(f"[OK] script saved: {len(p.script)} chars")


def cmd_run(project_dir: str, until: str, mock: bool) -> None:
	from scriptvision.pipeline.orchestrator import run_until
	from scriptvision.stages.base import StageContext

	ctx = StageContext(project_name=Path(project_dir).name, use_mock=mock)
	run_until(project_dir=project_dir, ctx=ctx, until=until)


def cmd_suggest(project_dir: str, mock: bool) -> None:
	from scriptvision.skills.suggest_shots import SuggestShotsSkill
	from scriptvision.stages.base import StageContext, llm_session

	paths, p = _load(project_dir)
	ctx = StageContext(use_mock=mock)

	with llm_session(paths, ctx) as llm:
		result = SuggestShotsSkill(llm).run(p.script, p.shot_list)

	if result.outcome != "ok":
		# 待审的旧批次保持原样
		print(f"[INFO] no suggestions could be parsed from the response; {len(p.suggested_shots)} pending suggestion(s) kept")
		return

	p.set_suggestions(result.suggestions)
	save_project(paths.project, p)

	print(f"[OK] {len(result.suggestions)} suggestion(s), strategy={result.strategy}")
	_print_suggestions(p)


def cmd_review(project_dir: str, toggle: List[int], select_all: bool, select_none: bool) -> None:
	paths, p = _load(project_dir)
	batch = p.suggested_shots

	if select_all:
		batch.select_all()
	elif select_none:
		batch.deselect_all()
	for i in toggle:
		batch.toggle(i)

	if select_all or select_none or toggle:
		save_project(paths.project, p)
	_print_suggestions(p)


def cmd_accept(project_dir: str, accept_all: bool, indexes: Optional[List[int]]) -> None:
	paths, p = _load(project_dir)
	batch = p.suggested_shots

	if accept_all:
		batch.select_all()
	for i in indexes or []:
		if not batch.is_selected(i):
			batch.toggle(i)

	added = p.accept_suggestions()
	save_project(paths.project, p)
	print(f"[OK] accepted {added} shot(s); shot list now has {len(p.shot_list)}")


def cmd_merge_subjects(project_dir: str) -> None:
	paths, p = _load(project_dir)

	skipped = []
	added = p.merge_proposed_subjects(skipped=skipped)
	save_project(paths.project, p)

	print(f"[OK] merged {added} subject(s); total {len(p.subjects)}")
	for s in skipped:
		print(f"[INFO] skipped duplicate subject: {s.name}")


def cmd_import(project_dir: str, file: str) -> None:
	from scriptvision.core.importer import import_shots

	paths, p = _load(project_dir)
	result = import_shots(p.shot_list, Path(file).read_text(encoding="utf-8"))

	if result.outcome == "invalid":
		raise ValueError("Invalid JSON format. Expected an array of shots.")
	if result.outcome == "nothing_parsed":
		print("[INFO] no shots found in the input")
		return

	p.shot_list = result.shots
	if p.shot_list:
		p.mark("shot_list_completed")
	save_project(paths.project, p)
	print(f"[OK] imported {result.imported} shot(s) from {result.source}; shot list now has {len(p.shot_list)}")


def cmd_parse(file: str, kind: str) -> None:
	from scriptvision.core.extract_shots import run_strategies
	from scriptvision.core.extract_subjects import extract_subjects

	raw = Path(file).read_text(encoding="utf-8")
	drops = []

	if kind == "shots":
		strategy, records = run_strategies(raw, drops)
		print(f"[INFO] strategy={strategy or '-'}")
	else:
		records = extract_subjects(raw, drops)

	print(json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2))
	for d in drops:
		print(f"[INFO] dropped ({d.strategy}): {d.reason} | {d.snippet}")
	print(f"[OK] {len(records)} record(s)")


def cmd_style(args) -> None:
	from scriptvision.core.schemas import Style

	paths, p = _load(args.project_dir)

	if args.style_cmd == "list":
		if not p.styles:
			print("[INFO] no styles")
		for s in p.styles:
			mark = "*" if s.id == p.selected_style_id else " "
			print(f"{mark} {s.id}  {s.name}  prefix={s.prefix!r} suffix={s.suffix!r}")
		return

	if args.style_cmd == "add":
		style = p.add_style(Style(
			name=args.name,
			prefix=args.prefix,
			suffix=args.suffix,
			genre=args.genre,
			descriptors=args.descriptors,
		))
		if args.select:
			p.select_style(style.id)
		print(f"[OK] style added: {style.id} ({style.name})")
	elif args.style_cmd == "select":
		p.select_style(args.id)
		print(f"[OK] selected style: {p.selected_style.name}")
	elif args.style_cmd == "delete":
		if not any(s.id == args.id for s in p.styles):
			raise ValueError(f"unknown style id: {args.id}")
		p.delete_style(args.id)
		print(f"[OK] style deleted: {args.id}")

	save_project(paths.project, p)


def _find_shot(project, shot_id: str):
	for s in project.shot_list:
		if s.id == shot_id:
			return s
	raise ValueError(f"unknown shot id: {shot_id}")


def cmd_shot(args) -> None:
	from dataclasses import fields, replace

	from scriptvision.core.schemas import ShotFields

	paths, p = _load(args.project_dir)

	if args.shot_cmd == "list":
		if not p.shot_list:
			print("[INFO] shot list is empty")
		for s in p.shot_list:
			print(f"{s.id}  Scene {s.scene}, Shot {s.shot} ({s.shot_size}) {s.description}")
		return

	shot = _find_shot(p, args.id)

	if args.shot_cmd == "edit":
		editable = {f.name for f in fields(ShotFields)}
		changes = {}
		for pair in args.set:
			key, sep, value = pair.partition("=")
			if not sep or key not in editable:
				raise ValueError(f"bad --set {pair!r}; editable fields: {', '.join(sorted(editable))}")
			changes[key] = value.strip()
		p.update_shot(replace(shot, **changes))
		print(f"[OK] shot updated: {shot.id}")
	elif args.shot_cmd == "delete":
		p.delete_shot(shot.id)
		print(f"[OK] shot deleted: {shot.id}; {len(p.shot_list)} left")

	save_project(paths.project, p)


def cmd_subject(args) -> None:
	from dataclasses import replace

	from scriptvision.core.schemas import Subject

	paths, p = _load(args.project_dir)

	if args.subject_cmd == "list":
		for label, items in (("subjects", p.subjects), ("proposed", p.proposed_subjects)):
			print(f"{label}: {len(items)}")
			for s in items:
				state = "on " if s.active else "off"
				print(f"  [{state}] {s.id}  {s.category}: {s.name}  {s.description}")
		return

	if args.subject_cmd == "add":
		subject = Subject(name=args.name.strip(), category=args.category, description=args.description, alias=args.alias)
		if not subject.name:
			raise ValueError("subject name is empty")
		if not p.add_subject(subject):
			print(f"[INFO] subject already exists: {subject.name}")
			return
		print(f"[OK] subject added: {subject.name}")
		save_project(paths.project, p)
		return

	found = [s for s in [*p.subjects, *p.proposed_subjects] if s.id == args.id]
	if not found:
		raise ValueError(f"unknown subject id: {args.id}")
	subject = found[0]

	if args.subject_cmd == "delete":
		p.delete_subject(subject.id)
		print(f"[OK] subject deleted: {subject.name}")
	elif args.subject_cmd == "toggle":
		p.update_subject(replace(subject, active=not subject.active))
		print(f"[OK] {subject.name} is now {'inactive' if subject.active else 'active'}")

	save_project(paths.project, p)


def cmd_prompts(args) -> None:
	from scriptvision.core.schemas import CameraSettings
	from scriptvision.stages.base import StageContext
	from scriptvision.stages.prompts import PromptsStage

	paths, _ = _load(args.project_dir)
	camera = CameraSettings(
		shot=args.camera_shot,
		move=args.move,
		framing=args.framing,
		depth_of_field=args.dof,
		camera_type=args.camera_type,
		camera_name=args.camera_name,
	)
	PromptsStage(shot_id=args.shot_id, camera=camera).run(paths, StageContext(use_mock=args.mock))

	p = load_project(paths.project)
	for g in p.generated_prompts:
		if args.shot_id and g.shot_id != args.shot_id:
			continue
		print(f"--- shot {g.shot_id}")
		print(f"concise : {g.concise}")
		print(f"normal  : {g.normal}")
		print(f"detailed: {g.detailed}")


def main(argv=None) -> None:
	args = build_parser().parse_args(argv)
	setup_logging(args.log_level)

	try:
		if args.cmd == "init":
			cmd_init(args.project_dir, args.name)
		elif args.cmd == "set-script":
			cmd_set_script(args.project_dir, args.file, args.text)
		elif args.cmd == "run":
			cmd_run(args.project_dir, args.until, args.mock)
		elif args.cmd == "suggest":
			cmd_suggest(args.project_dir, args.mock)
		elif args.cmd == "review":
			cmd_review(args.project_dir, args.toggle, args.all, args.none)
		elif args.cmd == "accept":
			cmd_accept(args.project_dir, args.all, args.index)
		elif args.cmd == "merge-subjects":
			cmd_merge_subjects(args.project_dir)
		elif args.cmd == "import":
			cmd_import(args.project_dir, args.file)
		elif args.cmd == "parse":
			cmd_parse(args.file, args.kind)
		elif args.cmd == "style":
			cmd_style(args)
		elif args.cmd == "shot":
			cmd_shot(args)
		elif args.cmd == "subject":
			cmd_subject(args)
		elif args.cmd == "prompts":
			cmd_prompts(args)
	except (ScriptVisionError, ValueError, FileNotFoundError, IndexError) as e:
		log.debug("command %s failed", args.cmd, exc_info=True)
		print(f"[ERROR] {e}")
		sys.exit(1)
